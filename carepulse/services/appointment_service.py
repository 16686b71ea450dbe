# carepulse/services/appointment_service.py

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import PyMongoError

from carepulse.core.exceptions import NotFoundError, StoreError
from carepulse.core.logger import get_module_logger
from carepulse.db.storage import to_object_id
from carepulse.models.appointment import STATUS_BY_ACTION
from carepulse.models.validation import validate_appointment
from carepulse.utils.date_utils import time_slot

logger = get_module_logger(__name__)


def serialize_appointment(doc: dict) -> dict:
    appointment = {key: value for key, value in doc.items() if key != "_id"}
    appointment["id"] = str(doc["_id"])
    return appointment


def find_doctor(doctors: Optional[List[Dict[str, Any]]], name: str) -> Optional[Dict[str, Any]]:
    """Exact name match against the supplied doctor list"""
    for doctor in doctors or []:
        if doctor.get("name") == name:
            return doctor
    return None


class AppointmentService:
    """
    Service class for appointment bookings and status changes
    """

    def __init__(self, db, settings):
        if db is None:
            raise ValueError("Database connection is required")
        self.db = db
        self.collection = db[settings.appointment_collection_id]

    def create_appointment(
            self,
            user_id: str,
            patient_id: str,
            data: Dict[str, Any],
            doctors: List[Dict[str, Any]],
    ) -> Dict[str, Any]:
        """
        Book a new appointment in pending state.

        Args:
            user_id: owning user
            patient_id: patient reference
            data: appointment form values (create schema)
            doctors: doctors to resolve primaryPhysician against

        Returns:
            The created appointment record
        """
        values = validate_appointment("create", data)

        doctor = find_doctor(doctors, values.primaryPhysician)
        if not doctor:
            logger.warning(f"Doctor not found for appointment: {values.primaryPhysician}")
            raise NotFoundError("Selected doctor not found")

        now = datetime.now(timezone.utc)
        document = {
            "user_id": user_id,
            "patient": patient_id,
            "primary_physician": values.primaryPhysician,
            "doctor_id": doctor["id"],
            "schedule": values.schedule,
            "appointment_date": values.schedule,
            "time_slot": time_slot(values.schedule),
            "reason": values.reason,
            "note": values.note,
            "status": STATUS_BY_ACTION["create"],
            "cancellation_reason": None,
            "fees": values.paymentAmount,
            "payment_method": values.paymentMethod,
            "payment_amount": values.paymentAmount,
            "transaction_id": values.transactionId,
            "created_at": now,
            "updated_at": now,
        }

        try:
            result = self.collection.insert_one(document)
        except PyMongoError as e:
            logger.error(f"Error creating appointment: {str(e)}")
            raise StoreError(f"Failed to create appointment: {str(e)}") from e

        document["_id"] = result.inserted_id
        logger.info(f"Appointment created: {result.inserted_id} with {values.primaryPhysician} at {document['time_slot']}")
        return serialize_appointment(document)

    def update_appointment(
            self,
            appointment_id: str,
            appointment: Dict[str, Any],
            type: str,
            doctors: Optional[List[Dict[str, Any]]] = None,
    ) -> Dict[str, Any]:
        """
        Apply a schedule or cancel action. No version check: the last write wins.
        """
        values = validate_appointment(type, appointment)
        object_id = to_object_id(appointment_id, "Appointment")

        update = {
            "primary_physician": values.primaryPhysician,
            "schedule": values.schedule,
            "appointment_date": values.schedule,
            "time_slot": time_slot(values.schedule),
            "status": STATUS_BY_ACTION.get(type, STATUS_BY_ACTION["schedule"]),
            "cancellation_reason": values.cancellationReason,
            "updated_at": datetime.now(timezone.utc),
        }

        doctor = find_doctor(doctors, values.primaryPhysician)
        if doctor:
            update["doctor_id"] = doctor["id"]

        try:
            doc = self.collection.find_one_and_update(
                {"_id": object_id},
                {"$set": update},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error(f"Error updating appointment {appointment_id}: {str(e)}")
            raise StoreError(f"Failed to update appointment: {str(e)}") from e

        if not doc:
            raise NotFoundError(f"Appointment {appointment_id} not found")

        logger.info(f"Appointment {appointment_id} is now {update['status']}")
        return serialize_appointment(doc)

    def get_appointment(self, appointment_id: str) -> Dict[str, Any]:
        object_id = to_object_id(appointment_id, "Appointment")
        try:
            doc = self.collection.find_one({"_id": object_id})
        except PyMongoError as e:
            logger.error(f"Error fetching appointment {appointment_id}: {str(e)}")
            raise StoreError(f"Failed to fetch appointment: {str(e)}") from e

        if not doc:
            raise NotFoundError(f"Appointment {appointment_id} not found")
        return serialize_appointment(doc)

    def get_recent_appointment_list(self) -> Dict[str, Any]:
        try:
            documents = [
                serialize_appointment(doc)
                for doc in self.collection.find().sort("created_at", DESCENDING)
            ]
        except PyMongoError as e:
            logger.error(f"Error listing appointments: {str(e)}")
            raise StoreError(f"Failed to list appointments: {str(e)}") from e

        counts = {"scheduled": 0, "pending": 0, "cancelled": 0}
        for appointment in documents:
            status = appointment.get("status")
            if status in counts:
                counts[status] += 1

        return {
            "total_count": len(documents),
            "scheduled_count": counts["scheduled"],
            "pending_count": counts["pending"],
            "cancelled_count": counts["cancelled"],
            "documents": documents,
        }
