# carepulse/models/patient.py

from datetime import datetime, date
from typing import Optional

from pydantic import BaseModel


class UserOut(BaseModel):
    id: str
    name: str
    email: str
    phone: str
    created_at: Optional[datetime] = None


class PatientOut(BaseModel):
    """Response model for patient data"""
    id: str
    user_id: str
    name: str
    email: str
    phone: str
    birth_date: date
    gender: str
    address: str
    occupation: str
    emergency_contact_name: str
    emergency_contact_number: str
    primary_physician: str
    insurance_provider: str
    insurance_policy_number: str
    allergies: Optional[str] = None
    current_medication: Optional[str] = None
    family_medical_history: Optional[str] = None
    past_medical_history: Optional[str] = None
    identification_type: Optional[str] = None
    identification_number: Optional[str] = None
    created_at: Optional[datetime] = None
