# carepulse/api/dependencies.py

from fastapi import Depends

from carepulse.core.config import Settings, get_settings
from carepulse.db.client import get_db, get_storage
from carepulse.db.storage import ObjectStorage
from carepulse.services.appointment_service import AppointmentService
from carepulse.services.doctor_service import DoctorService
from carepulse.services.patient_service import PatientService


def get_doctor_service(
        db=Depends(get_db),
        storage: ObjectStorage = Depends(get_storage),
        settings: Settings = Depends(get_settings),
) -> DoctorService:
    """Dependency to get doctor service with database and image storage"""
    return DoctorService(db, storage, settings)


def get_appointment_service(
        db=Depends(get_db),
        settings: Settings = Depends(get_settings),
) -> AppointmentService:
    return AppointmentService(db, settings)


def get_patient_service(
        db=Depends(get_db),
        settings: Settings = Depends(get_settings),
) -> PatientService:
    return PatientService(db, settings)
