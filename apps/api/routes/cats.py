from __future__ import annotations

from typing import Any, Dict, List

from fastapi import APIRouter, HTTPException

from apps.api.schemas.cats import CatCreateRequest, CatResponse, CatUpdateRequest
from packages.core import config
from packages.core.cats.models import Cat
from packages.core.cats.service import create_cat, delete_cat, list_cats, update_cat
from packages.core.storage.sqlite import SQLiteCareStore


router = APIRouter(prefix="/cats", tags=["cats"])


def _store() -> SQLiteCareStore:
    return SQLiteCareStore(db_path=config.db_path())


def _to_response(cat: Cat) -> CatResponse:
    return CatResponse(
        id=cat.id,
        name=cat.name,
        breed=cat.breed,
        age=cat.age,
        weight=cat.weight,
        color=cat.color,
        microchip=cat.microchip,
        vet_name=cat.vet_name,
        vet_phone=cat.vet_phone,
        vet_address=cat.vet_address,
        medical_history=list(cat.medical_history),
        created_at=cat.created_at,
        updated_at=cat.updated_at,
    )


@router.post("", response_model=CatResponse)
def create(payload: CatCreateRequest) -> CatResponse:
    try:
        cat = create_cat(_store(), **payload.model_dump())
    except Exception as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return _to_response(cat)


@router.get("", response_model=List[CatResponse])
def list_all() -> List[CatResponse]:
    return [_to_response(cat) for cat in list_cats(_store())]


@router.get("/{cat_id}", response_model=CatResponse)
def get(cat_id: str) -> CatResponse:
    cat = _store().get_cat(cat_id)
    if cat is None:
        raise HTTPException(status_code=404, detail="Cat not found")
    return _to_response(cat)


@router.patch("/{cat_id}", response_model=CatResponse)
def update(cat_id: str, payload: CatUpdateRequest) -> CatResponse:
    store = _store()
    cat = store.get_cat(cat_id)
    if cat is None:
        raise HTTPException(status_code=404, detail="Cat not found")
    try:
        updated = update_cat(store, cat, **payload.model_dump())
    except Exception as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return _to_response(updated)


@router.delete("/{cat_id}")
def delete(cat_id: str) -> Dict[str, Any]:
    store = _store()
    if not delete_cat(store, cat_id):
        raise HTTPException(status_code=404, detail="Cat not found")
    return {"status": "deleted", "id": cat_id}
