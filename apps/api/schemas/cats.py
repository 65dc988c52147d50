from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field


class CatCreateRequest(BaseModel):
    name: str = Field(..., min_length=1)
    breed: Optional[str] = None
    age: Optional[int] = Field(default=None, ge=0)
    weight: Optional[float] = Field(default=None, ge=0)
    color: Optional[str] = None
    microchip: Optional[str] = None
    vet_name: Optional[str] = None
    vet_phone: Optional[str] = None
    vet_address: Optional[str] = None
    medical_history: List[str] = Field(default_factory=list)


class CatUpdateRequest(BaseModel):
    name: Optional[str] = None
    breed: Optional[str] = None
    age: Optional[int] = Field(default=None, ge=0)
    weight: Optional[float] = Field(default=None, ge=0)
    color: Optional[str] = None
    microchip: Optional[str] = None
    vet_name: Optional[str] = None
    vet_phone: Optional[str] = None
    vet_address: Optional[str] = None
    medical_history: Optional[List[str]] = None


class CatResponse(BaseModel):
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
    medical_history: List[str]
    created_at: str
    updated_at: str
