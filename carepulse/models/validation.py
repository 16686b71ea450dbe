# carepulse/models/validation.py

import re
from datetime import datetime, date
from typing import Any, Dict, Literal, Optional, Type

from pydantic import BaseModel, EmailStr, Field, ValidationInfo, field_validator
from pydantic import ValidationError as PydanticValidationError

from carepulse.core.exceptions import ValidationError

PAYMENT_METHODS = ("cash", "easypaisa", "jazzcash", "bank")
APPOINTMENT_ACTIONS = ("create", "schedule", "cancel")

NAME_PATTERN = re.compile(r"^[a-zA-Z\s]+$")
PHONE_SEPARATORS = re.compile(r"[\s\-\(\)]")
PHONE_PATTERNS = (
    re.compile(r"^\+92\d{10}$"),  # +923001234567
    re.compile(r"^92\d{10}$"),  # 923001234567
    re.compile(r"^03\d{9}$"),  # 03001234567
)


def sanitize_phone_number(phone: str) -> str:
    return PHONE_SEPARATORS.sub("", phone or "")


def is_valid_phone(phone: str) -> bool:
    cleaned = sanitize_phone_number(phone)
    return any(pattern.match(cleaned) for pattern in PHONE_PATTERNS)


def _check_name(v: str) -> str:
    if len(v) < 2:
        raise ValueError("Name must be at least 2 characters")
    if len(v) > 50:
        raise ValueError("Name must be less than 50 characters")
    if not NAME_PATTERN.match(v):
        raise ValueError("Name can only contain letters and spaces")
    return v


def _check_phone(v: str) -> str:
    if not is_valid_phone(v):
        raise ValueError("Invalid phone number. Use: +92 3XX XXXXXXX or 03XX XXXXXXX")
    return v


def _check_length(v: str, label: str, min_length: int, max_length: int) -> str:
    if len(v) < min_length:
        raise ValueError(f"{label} must be at least {min_length} characters")
    if len(v) > max_length:
        raise ValueError(f"{label} must be less than {max_length} characters")
    return v


# ----------------------------------------
# Person records
# ----------------------------------------

class UserForm(BaseModel):
    """Contact details collected on the landing form"""
    name: str
    email: EmailStr
    phone: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return _check_name(v)

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, v):
        return _check_phone(v)


class PatientForm(UserForm):
    """Full patient registration form"""
    birthDate: date
    gender: Literal["Male", "Female"]
    address: str
    occupation: str
    emergencyContactName: str
    emergencyContactNumber: str
    primaryPhysician: str
    insuranceProvider: str
    insurancePolicyNumber: str
    allergies: Optional[str] = None
    currentMedication: Optional[str] = None
    familyMedicalHistory: Optional[str] = None
    pastMedicalHistory: Optional[str] = None
    identificationType: Optional[str] = None
    identificationNumber: Optional[str] = None
    treatmentConsent: bool = Field(False, validate_default=True)
    disclosureConsent: bool = Field(False, validate_default=True)
    privacyConsent: bool = Field(False, validate_default=True)

    @field_validator("emergencyContactName")
    @classmethod
    def validate_emergency_name(cls, v):
        return _check_name(v)

    @field_validator("emergencyContactNumber")
    @classmethod
    def validate_emergency_number(cls, v):
        return _check_phone(v)

    @field_validator("address")
    @classmethod
    def validate_address(cls, v):
        return _check_length(v, "Address", 5, 500)

    @field_validator("occupation")
    @classmethod
    def validate_occupation(cls, v):
        return _check_length(v, "Occupation", 2, 500)

    @field_validator("primaryPhysician")
    @classmethod
    def validate_physician(cls, v):
        if len(v) < 2:
            raise ValueError("Select at least one doctor")
        return v

    @field_validator("insuranceProvider")
    @classmethod
    def validate_insurance_provider(cls, v):
        return _check_length(v, "Insurance provider name", 2, 50)

    @field_validator("insurancePolicyNumber")
    @classmethod
    def validate_policy_number(cls, v):
        return _check_length(v, "Policy number", 2, 50)

    @field_validator("treatmentConsent", "disclosureConsent", "privacyConsent")
    @classmethod
    def validate_consent(cls, v, info: ValidationInfo):
        if v is not True:
            topic = info.field_name.replace("Consent", "")
            raise ValueError(f"You must consent to {topic} in order to proceed")
        return v


# ----------------------------------------
# Appointment schemas, one per action type
# ----------------------------------------

class AppointmentBase(BaseModel):
    primaryPhysician: str
    schedule: datetime
    reason: Optional[str] = None
    note: Optional[str] = None
    cancellationReason: Optional[str] = None

    @field_validator("primaryPhysician")
    @classmethod
    def validate_physician(cls, v):
        if len(v) < 2:
            raise ValueError("Select at least one doctor")
        return v


class ScheduleAppointmentSchema(AppointmentBase):
    pass


class CancelAppointmentSchema(AppointmentBase):
    cancellationReason: str

    @field_validator("cancellationReason")
    @classmethod
    def validate_cancellation_reason(cls, v):
        return _check_length(v, "Reason", 2, 500)


class CreateAppointmentSchema(AppointmentBase):
    reason: str
    paymentMethod: Optional[Literal["cash", "easypaisa", "jazzcash", "bank"]] = Field(
        None, validate_default=True
    )
    paymentAmount: float = Field(..., strict=True, allow_inf_nan=False)
    transactionId: Optional[str] = Field(None, validate_default=True)

    @field_validator("reason")
    @classmethod
    def validate_reason(cls, v):
        return _check_length(v, "Reason", 2, 500)

    @field_validator("paymentMethod")
    @classmethod
    def validate_payment_method(cls, v):
        if v is None:
            raise ValueError("Please select a payment method")
        return v

    @field_validator("paymentAmount")
    @classmethod
    def validate_payment_amount(cls, v):
        if v < 100:
            raise ValueError("Minimum payment amount is Rs. 100")
        return v

    @field_validator("transactionId")
    @classmethod
    def validate_transaction_id(cls, v, info: ValidationInfo):
        method = info.data.get("paymentMethod")
        if method and method != "cash" and not (v or "").strip():
            raise ValueError("Transaction ID is required for non-cash payments")
        return v.strip() if v else None


def get_appointment_schema(type: str) -> Type[AppointmentBase]:
    if type == "create":
        return CreateAppointmentSchema
    if type == "cancel":
        return CancelAppointmentSchema
    return ScheduleAppointmentSchema


def collect_errors(exc: PydanticValidationError) -> Dict[str, str]:
    """Flatten pydantic errors to {field: message}, first message per field wins."""
    errors: Dict[str, str] = {}
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"]) or "__root__"
        ctx_error = (error.get("ctx") or {}).get("error")
        message = str(ctx_error) if ctx_error else error["msg"]
        errors.setdefault(field, message)
    return errors


def validate_model(model: Type[BaseModel], payload: Any) -> BaseModel:
    if isinstance(payload, model):
        return payload
    if isinstance(payload, BaseModel):
        payload = payload.model_dump()
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        errors = collect_errors(e)
        message = "; ".join(f"{field}: {msg}" for field, msg in errors.items())
        raise ValidationError(f"Validation error: {message}", errors) from e


def validate_appointment(type: str, payload: Dict[str, Any]) -> AppointmentBase:
    return validate_model(get_appointment_schema(type), payload)
