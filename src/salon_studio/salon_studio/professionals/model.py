from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Professional:
    professional_id: str
    name: str
    specialty: str = ""
    commission_rate: Optional[float] = None
