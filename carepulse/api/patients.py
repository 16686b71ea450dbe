# carepulse/api/patients.py

from typing import Any, Dict

from fastapi import APIRouter, Depends
from fastapi import status as http_status

from carepulse.api.dependencies import get_patient_service
from carepulse.api.errors import to_http_exception
from carepulse.core.exceptions import CarePulseError
from carepulse.core.logger import logger
from carepulse.models.patient import PatientOut, UserOut
from carepulse.services.patient_service import PatientService

router = APIRouter(tags=["Patients"])


@router.post("/users/", response_model=UserOut, status_code=http_status.HTTP_201_CREATED)
def create_user(
        user_data: Dict[str, Any],
        patient_service: PatientService = Depends(get_patient_service),
):
    """Create a user from the landing form, or return the one already registered"""
    try:
        return patient_service.create_user(user_data)
    except CarePulseError as e:
        logger.error(f"Error in create_user route: {e.message}")
        raise to_http_exception(e)


@router.get("/users/{user_id}", response_model=UserOut)
def get_user(user_id: str, patient_service: PatientService = Depends(get_patient_service)):
    try:
        return patient_service.get_user(user_id)
    except CarePulseError as e:
        raise to_http_exception(e)


@router.post("/patients/{user_id}/register", response_model=PatientOut, status_code=http_status.HTTP_201_CREATED)
def register_patient(
        user_id: str,
        patient_data: Dict[str, Any],
        patient_service: PatientService = Depends(get_patient_service),
):
    try:
        return patient_service.register_patient(user_id, patient_data)
    except CarePulseError as e:
        logger.error(f"Error registering patient for user {user_id}: {e.message}")
        raise to_http_exception(e)


@router.get("/patients/{user_id}", response_model=PatientOut)
def get_patient(user_id: str, patient_service: PatientService = Depends(get_patient_service)):
    """Get the patient registered by a user"""
    try:
        return patient_service.get_patient(user_id)
    except CarePulseError as e:
        raise to_http_exception(e)
