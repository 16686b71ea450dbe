# carepulse/models/appointment.py

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel

Status = Literal["pending", "scheduled", "cancelled"]
PaymentMethod = Literal["cash", "easypaisa", "jazzcash", "bank"]

# action type -> resulting status
STATUS_BY_ACTION = {
    "create": "pending",
    "schedule": "scheduled",
    "cancel": "cancelled",
}


class AppointmentCreateRequest(BaseModel):
    """Patient-initiated booking; form fields are validated by the create schema"""
    userId: str
    patient: str
    appointment: Dict[str, Any]


class AppointmentUpdateRequest(BaseModel):
    userId: Optional[str] = None
    type: Literal["schedule", "cancel"]
    appointment: Dict[str, Any]


class AppointmentOut(BaseModel):
    id: str
    user_id: str
    patient: str
    primary_physician: str
    doctor_id: Optional[str] = None
    schedule: datetime
    appointment_date: Optional[datetime] = None
    time_slot: str
    reason: Optional[str] = None
    note: Optional[str] = None
    status: Status
    cancellation_reason: Optional[str] = None
    payment_method: Optional[PaymentMethod] = None
    payment_amount: Optional[float] = None
    fees: Optional[float] = None
    transaction_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class RecentAppointmentList(BaseModel):
    total_count: int
    scheduled_count: int
    pending_count: int
    cancelled_count: int
    documents: List[AppointmentOut]
