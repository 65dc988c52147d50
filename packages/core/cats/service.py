from __future__ import annotations

import datetime as dt
import uuid
from typing import TYPE_CHECKING, List, Optional, Sequence

from .models import Cat

if TYPE_CHECKING:
    from ..storage.base import CatStore


def _utc_now_iso() -> str:
    return dt.datetime.now(dt.timezone.utc).isoformat()


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def create_cat(
    store: CatStore,
    name: str,
    breed: Optional[str] = None,
    age: Optional[int] = None,
    weight: Optional[float] = None,
    color: Optional[str] = None,
    microchip: Optional[str] = None,
    vet_name: Optional[str] = None,
    vet_phone: Optional[str] = None,
    vet_address: Optional[str] = None,
    medical_history: Optional[Sequence[str]] = None,
) -> Cat:
    now = _utc_now_iso()
    cat = Cat(
        id=str(uuid.uuid4()),
        name=name.strip(),
        breed=_clean(breed),
        age=age,
        weight=weight,
        color=_clean(color),
        microchip=_clean(microchip),
        vet_name=_clean(vet_name),
        vet_phone=_clean(vet_phone),
        vet_address=_clean(vet_address),
        medical_history=[entry.strip() for entry in medical_history or [] if entry.strip()],
        created_at=now,
        updated_at=now,
    )
    store.create_cat(cat)
    return cat


def update_cat(store: CatStore, cat: Cat, **changes: object) -> Cat:
    """Apply the non-None ``changes`` to ``cat`` and persist the result."""
    values = {**cat.__dict__}
    for field_name, value in changes.items():
        if field_name not in values or field_name in ("id", "created_at", "updated_at"):
            raise ValueError(f"unknown cat field: {field_name}")
        if value is None:
            continue
        values[field_name] = _clean(value) if isinstance(value, str) else value
    if not values["name"]:
        raise ValueError("cat name must not be empty")
    values["updated_at"] = _utc_now_iso()
    updated = Cat(**values)
    store.update_cat(updated)
    return updated


def delete_cat(store: CatStore, cat_id: str) -> bool:
    return store.delete_cat(cat_id)


def list_cats(store: CatStore) -> List[Cat]:
    return store.list_cats()
