from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class AdminUser:
    user_id: str
    email: str
    full_name: str
    password_hash: str
    is_active: bool = True
    role: Role = Role.ADMIN
