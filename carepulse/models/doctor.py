# Doctor records as returned by the API

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


SPECIALITIES = [
    "Cardiology",
    "Dermatology",
    "Neurology",
    "Orthopedics",
    "Pediatrics",
    "Psychiatry",
    "Radiology",
    "Surgery",
    "General Practice",
    "Other",
]


class DoctorOut(BaseModel):
    id: str
    name: str
    speciality: str
    image: str
    image_id: str
    created_at: Optional[datetime] = None


class DoctorDeleteResponse(BaseModel):
    success: bool
