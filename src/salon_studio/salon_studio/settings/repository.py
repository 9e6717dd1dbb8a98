from __future__ import annotations

from typing import Any, Optional, Protocol


class SettingsRepository(Protocol):
    def get(self) -> Optional[dict[str, Any]]:
        """Return the stored settings keyed by AppSettings attribute name.

        Only fields present in the document are returned; None when the document is missing.
        """

        raise NotImplementedError

    def save(self, fields: dict[str, Any]) -> None:
        """Merge-write the given fields (AppSettings attribute names)."""

        raise NotImplementedError
