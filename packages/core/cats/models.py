from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class Cat:
    id: str
    name: str
    breed: Optional[str]
    age: Optional[int]
    weight: Optional[float]
    color: Optional[str]
    microchip: Optional[str]
    vet_name: Optional[str]
    vet_phone: Optional[str]
    vet_address: Optional[str]
    created_at: str
    updated_at: str
    medical_history: List[str] = field(default_factory=list)
