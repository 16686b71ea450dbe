# carepulse/helpers/patient_helper.py

from datetime import datetime, timezone
from typing import Any, Dict

from carepulse.models.validation import PatientForm, UserForm, sanitize_phone_number
from carepulse.utils.date_utils import to_datetime


def format_user_document(form: UserForm) -> Dict[str, Any]:
    return {
        "name": form.name.strip(),
        "email": form.email.lower(),
        "phone": sanitize_phone_number(form.phone),
        "created_at": datetime.now(timezone.utc),
    }


def format_patient_document(form: PatientForm, user_id: str) -> Dict[str, Any]:
    """
    Format patient data for database insertion
    """
    return {
        "user_id": user_id,
        "name": form.name.strip(),
        "email": form.email.lower(),
        "phone": sanitize_phone_number(form.phone),
        "birth_date": to_datetime(form.birthDate),
        "gender": form.gender,
        "address": form.address,
        "occupation": form.occupation,
        "emergency_contact_name": form.emergencyContactName,
        "emergency_contact_number": sanitize_phone_number(form.emergencyContactNumber),
        "primary_physician": form.primaryPhysician,
        "insurance_provider": form.insuranceProvider,
        "insurance_policy_number": form.insurancePolicyNumber,
        "allergies": form.allergies,
        "current_medication": form.currentMedication,
        "family_medical_history": form.familyMedicalHistory,
        "past_medical_history": form.pastMedicalHistory,
        "identification_type": form.identificationType,
        "identification_number": form.identificationNumber,
        "treatment_consent": form.treatmentConsent,
        "disclosure_consent": form.disclosureConsent,
        "privacy_consent": form.privacyConsent,
        "created_at": datetime.now(timezone.utc),
    }


def serialize_record(doc: dict) -> dict:
    record = {key: value for key, value in doc.items() if key != "_id"}
    record["id"] = str(doc["_id"])
    if isinstance(record.get("birth_date"), datetime):
        record["birth_date"] = record["birth_date"].date()
    return record
