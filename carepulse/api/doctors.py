# carepulse/api/doctors.py

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi import status as http_status

from carepulse.api.dependencies import get_doctor_service
from carepulse.api.errors import to_http_exception
from carepulse.core.exceptions import CarePulseError
from carepulse.core.logger import logger
from carepulse.models.doctor import SPECIALITIES, DoctorDeleteResponse, DoctorOut
from carepulse.services.doctor_service import DoctorService

router = APIRouter(
    prefix="/doctors",
    tags=["Doctors"]
)


@router.post("/", response_model=DoctorOut, status_code=http_status.HTTP_201_CREATED)
def add_doctor(
        name: Optional[str] = Form(None),
        speciality: Optional[str] = Form(None),
        image: Optional[UploadFile] = File(None),
        doctor_service: DoctorService = Depends(get_doctor_service),
):
    """Register a doctor from the admin form (multipart: name, speciality, image)"""
    image_bytes = image.file.read() if image else None
    try:
        return doctor_service.create_doctor(
            name,
            speciality,
            image_bytes,
            image.filename if image else None,
            image.content_type if image else None,
        )
    except CarePulseError as e:
        logger.error(f"Failed to create doctor: {e.message}")
        raise to_http_exception(e)


@router.get("/", response_model=List[DoctorOut])
def get_doctors(doctor_service: DoctorService = Depends(get_doctor_service)):
    return doctor_service.get_doctors()


@router.get("/specialities", response_model=List[str])
def get_specialities():
    return SPECIALITIES


@router.get("/{doctor_id}", response_model=DoctorOut)
def get_doctor(doctor_id: str, doctor_service: DoctorService = Depends(get_doctor_service)):
    try:
        return doctor_service.get_doctor(doctor_id)
    except CarePulseError as e:
        raise to_http_exception(e)


@router.delete("/{doctor_id}", response_model=DoctorDeleteResponse)
def delete_doctor(
        doctor_id: str,
        image_id: str = Query(..., description="Object id of the doctor's profile image"),
        doctor_service: DoctorService = Depends(get_doctor_service),
):
    try:
        return doctor_service.delete_doctor(doctor_id, image_id)
    except CarePulseError as e:
        logger.error(f"Error deleting doctor {doctor_id}: {e.message}")
        raise to_http_exception(e)
