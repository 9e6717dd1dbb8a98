from __future__ import annotations

from typing import Optional, Protocol

from .model import AdminUser


class AdminRepository(Protocol):
    def get_by_email(self, email: str) -> Optional[AdminUser]:
        raise NotImplementedError

    def upsert(self, *, user_id: str, email: str, full_name: str, password_hash: str) -> None:
        raise NotImplementedError
