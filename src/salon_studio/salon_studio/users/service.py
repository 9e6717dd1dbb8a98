from __future__ import annotations

from dataclasses import dataclass

from werkzeug.security import check_password_hash

from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from .repository import AdminRepository


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_id: str
    full_name: str
    email: str
    role: Role


class AuthService:
    """Use case: authenticate salon staff (login)."""

    def __init__(self, admins: AdminRepository):
        self._admins = admins

    def authenticate(self, email: str, password: str) -> SessionUser:
        email = (email or "").strip().lower()
        if not email or not password:
            raise AuthenticationError("Email e senha são obrigatórios.")

        user = self._admins.get_by_email(email)
        if not user or not user.is_active:
            raise AuthenticationError("E-mail ou senha inválidos.")

        try:
            ok = check_password_hash(user.password_hash, password)
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("E-mail ou senha inválidos.")

        return SessionUser(user_id=user.user_id, full_name=user.full_name, email=user.email, role=user.role)
