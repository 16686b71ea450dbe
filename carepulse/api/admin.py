# carepulse/api/admin.py

from fastapi import APIRouter, Depends

from carepulse.api.dependencies import get_appointment_service, get_doctor_service, get_patient_service
from carepulse.api.errors import to_http_exception
from carepulse.core.exceptions import CarePulseError
from carepulse.core.logger import logger
from carepulse.helpers.appointment_helper import build_appointment_row
from carepulse.services.appointment_service import AppointmentService
from carepulse.services.doctor_service import DoctorService
from carepulse.services.patient_service import PatientService

router = APIRouter(
    prefix="/admin",
    tags=["Admin"]
)


@router.get("/dashboard")
def get_dashboard(
        appointment_service: AppointmentService = Depends(get_appointment_service),
        patient_service: PatientService = Depends(get_patient_service),
        doctor_service: DoctorService = Depends(get_doctor_service),
):
    """
    Stat cards and table rows for the admin dashboard.
    """
    try:
        appointments = appointment_service.get_recent_appointment_list()
        patients = patient_service.get_patients_by_id(
            [a["patient"] for a in appointments["documents"] if a.get("patient")]
        )
    except CarePulseError as e:
        logger.error(f"Error building admin dashboard: {e.message}")
        raise to_http_exception(e)

    rows = [
        build_appointment_row(appointment, patients.get(appointment.get("patient")))
        for appointment in appointments["documents"]
    ]

    return {
        "scheduled_count": appointments["scheduled_count"],
        "pending_count": appointments["pending_count"],
        "cancelled_count": appointments["cancelled_count"],
        "doctors": doctor_service.get_doctors(),
        "rows": rows,
    }
