# app/system_models/medicine_model/medicine_schemas.py
from typing import Optional

from app.system_models.base_schemas import ClinicSchema


class MedicineBase(ClinicSchema):
    name: str
    category: Optional[str] = None
    description: Optional[str] = None


class MedicineSeed(MedicineBase):
    """Catalog entry as loaded from seed data or a snapshot."""
    id: Optional[int] = None


class MedicineResponse(MedicineBase):
    id: int
