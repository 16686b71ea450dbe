# carepulse/api/appointments.py

from fastapi import APIRouter, Depends
from fastapi import status as http_status

from carepulse.api.dependencies import get_appointment_service, get_doctor_service
from carepulse.api.errors import to_http_exception
from carepulse.core.exceptions import CarePulseError
from carepulse.core.logger import logger
from carepulse.models.appointment import (
    AppointmentCreateRequest,
    AppointmentOut,
    AppointmentUpdateRequest,
    RecentAppointmentList,
)
from carepulse.services.appointment_service import AppointmentService
from carepulse.services.doctor_service import DoctorService

router = APIRouter(
    prefix="/appointments",
    tags=["Appointments"]
)


@router.post("/", response_model=AppointmentOut, status_code=http_status.HTTP_201_CREATED)
def create_appointment(
        request: AppointmentCreateRequest,
        appointment_service: AppointmentService = Depends(get_appointment_service),
        doctor_service: DoctorService = Depends(get_doctor_service),
):
    """Book an appointment; the doctor is looked up by name among registered doctors"""
    try:
        doctors = doctor_service.get_doctors()
        return appointment_service.create_appointment(
            request.userId,
            request.patient,
            request.appointment,
            doctors,
        )
    except CarePulseError as e:
        logger.error(f"Failed to create appointment for user {request.userId}: {e.message}")
        raise to_http_exception(e)


@router.get("/recent", response_model=RecentAppointmentList)
def get_recent_appointment_list(
        appointment_service: AppointmentService = Depends(get_appointment_service),
):
    try:
        return appointment_service.get_recent_appointment_list()
    except CarePulseError as e:
        raise to_http_exception(e)


@router.get("/{appointment_id}", response_model=AppointmentOut)
def get_appointment(
        appointment_id: str,
        appointment_service: AppointmentService = Depends(get_appointment_service),
):
    try:
        return appointment_service.get_appointment(appointment_id)
    except CarePulseError as e:
        raise to_http_exception(e)


@router.patch("/{appointment_id}", response_model=AppointmentOut)
def update_appointment(
        appointment_id: str,
        request: AppointmentUpdateRequest,
        appointment_service: AppointmentService = Depends(get_appointment_service),
        doctor_service: DoctorService = Depends(get_doctor_service),
):
    """Schedule or cancel an appointment"""
    try:
        return appointment_service.update_appointment(
            appointment_id,
            request.appointment,
            request.type,
            doctor_service.get_doctors(),
        )
    except CarePulseError as e:
        logger.error(f"Failed to {request.type} appointment {appointment_id}: {e.message}")
        raise to_http_exception(e)
