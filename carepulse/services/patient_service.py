# carepulse/services/patient_service.py

from typing import Any, Dict, List

from pymongo.errors import DuplicateKeyError, PyMongoError

from carepulse.core.exceptions import NotFoundError, StoreError, ValidationError
from carepulse.core.logger import get_module_logger
from carepulse.db.storage import to_object_id
from carepulse.helpers.patient_helper import (
    format_patient_document,
    format_user_document,
    serialize_record,
)
from carepulse.models.validation import PatientForm, UserForm, validate_model

logger = get_module_logger(__name__)


class PatientService:
    """
    Service class for users and their patient registrations
    """

    def __init__(self, db, settings):
        """
        Initialize with database dependency

        Args:
            db: Database handle
            settings: resolved configuration
        """
        if db is None:
            raise ValueError("Database connection is required")
        self.db = db
        self.users = db[settings.user_collection_id]
        self.patients = db[settings.patient_collection_id]

    def create_user(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Create a user, or return the existing one registered under the same email"""
        form = validate_model(UserForm, data)
        document = format_user_document(form)

        try:
            existing = self.users.find_one({"email": document["email"]})
            if existing:
                logger.info(f"User already exists: {existing['_id']}")
                return serialize_record(existing)

            result = self.users.insert_one(document)
        except DuplicateKeyError:
            # Registered concurrently under the same email
            return self._existing_user(document["email"])
        except PyMongoError as e:
            logger.error(f"Error creating user: {str(e)}")
            raise StoreError(f"Failed to create user: {str(e)}") from e

        document["_id"] = result.inserted_id
        logger.info(f"New user created: {result.inserted_id}")
        return serialize_record(document)

    def _existing_user(self, email: str) -> Dict[str, Any]:
        try:
            existing = self.users.find_one({"email": email})
        except PyMongoError as e:
            logger.error(f"Error fetching user {email}: {str(e)}")
            raise StoreError(f"Failed to create user: {str(e)}") from e

        if not existing:
            raise StoreError(f"Failed to create user: duplicate email {email} could not be read back")
        logger.info(f"User already exists: {existing['_id']}")
        return serialize_record(existing)

    def get_user(self, user_id: str) -> Dict[str, Any]:
        object_id = to_object_id(user_id, "User")
        try:
            user = self.users.find_one({"_id": object_id})
        except PyMongoError as e:
            logger.error(f"Error fetching user {user_id}: {str(e)}")
            raise StoreError(f"Failed to fetch user: {str(e)}") from e

        if not user:
            raise NotFoundError(f"User {user_id} not found")
        return serialize_record(user)

    def register_patient(self, user_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        form = validate_model(PatientForm, data)
        self.get_user(user_id)

        document = format_patient_document(form, user_id)
        try:
            result = self.patients.insert_one(document)
        except DuplicateKeyError as e:
            logger.warning(f"Patient already registered for user {user_id}")
            raise ValidationError(
                "Patient already registered",
                {"user_id": "A patient is already registered for this user"},
            ) from e
        except PyMongoError as e:
            logger.error(f"Error registering patient for user {user_id}: {str(e)}")
            raise StoreError(f"Failed to register patient: {str(e)}") from e

        document["_id"] = result.inserted_id
        logger.info(f"New patient registered: {result.inserted_id} for user {user_id}")
        return serialize_record(document)

    def get_patient(self, user_id: str) -> Dict[str, Any]:
        try:
            patient = self.patients.find_one({"user_id": user_id})
        except PyMongoError as e:
            logger.error(f"Error fetching patient for user {user_id}: {str(e)}")
            raise StoreError(f"Failed to fetch patient: {str(e)}") from e

        if not patient:
            raise NotFoundError(f"Patient for user {user_id} not found")
        return serialize_record(patient)

    def get_patients_by_id(self, patient_ids: List[str]) -> Dict[str, Dict[str, Any]]:
        """Look up several patients at once, keyed by patient id. Unknown ids are skipped."""
        object_ids = []
        for patient_id in set(patient_ids):
            try:
                object_ids.append(to_object_id(patient_id, "Patient"))
            except NotFoundError:
                logger.warning(f"Skipping malformed patient id {patient_id}")

        if not object_ids:
            return {}

        try:
            patients = self.patients.find({"_id": {"$in": object_ids}})
            return {str(p["_id"]): serialize_record(p) for p in patients}
        except PyMongoError as e:
            logger.error(f"Error fetching patients: {str(e)}")
            raise StoreError(f"Failed to fetch patients: {str(e)}") from e
