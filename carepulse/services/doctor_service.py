# carepulse/services/doctor_service.py

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pymongo import DESCENDING
from pymongo.errors import PyMongoError

from carepulse.core.exceptions import NotFoundError, StoreError, ValidationError
from carepulse.core.logger import get_module_logger
from carepulse.db.storage import to_object_id

logger = get_module_logger(__name__)


def serialize_doctor(doc: dict) -> dict:
    return {
        "id": str(doc["_id"]),
        "name": doc.get("name"),
        "speciality": doc.get("speciality"),
        "image": doc.get("image"),
        "image_id": doc.get("image_id"),
        "created_at": doc.get("created_at"),
    }


class DoctorService:
    """
    Doctor registry: profile images live in the object store, records in the
    doctors collection.
    """

    def __init__(self, db, storage, settings):
        if db is None:
            raise ValueError("Database connection is required")
        self.db = db
        self.storage = storage
        self.collection = db[settings.doctor_collection_id]

    def create_doctor(
            self,
            name: Optional[str],
            speciality: Optional[str],
            image_bytes: Optional[bytes],
            image_filename: Optional[str],
            content_type: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Upload the profile image, then insert the doctor record.

        If the insert fails the uploaded image is deleted again before the
        error is raised.
        """
        name = (name or "").strip()
        speciality = (speciality or "").strip()
        if not name or not speciality or not image_bytes:
            raise ValidationError("Missing required fields", {
                field: "This field is required"
                for field, value in (("name", name), ("speciality", speciality), ("image", image_bytes))
                if not value
            })

        logger.info(f"Creating doctor {name} ({speciality}), image size {len(image_bytes)}")

        image_id = self.storage.create_file(image_bytes, image_filename or "image", content_type)
        image_url = self.storage.file_url(image_id)

        document = {
            "name": name,
            "speciality": speciality,
            "image": image_url,
            "image_id": image_id,
            "created_at": datetime.now(timezone.utc),
        }

        try:
            result = self.collection.insert_one(document)
        except PyMongoError as e:
            logger.error(f"Error creating doctor {name}: {str(e)}")
            self._discard_image(image_id)
            raise StoreError(f"Failed to create doctor: {str(e)}") from e

        document["_id"] = result.inserted_id
        logger.info(f"Doctor created: {result.inserted_id}")
        return serialize_doctor(document)

    def _discard_image(self, image_id: str) -> None:
        try:
            self.storage.delete_file(image_id)
            logger.info(f"Removed orphaned image {image_id}")
        except (StoreError, NotFoundError) as e:
            logger.error(f"Could not remove orphaned image {image_id}: {e.message}")

    def get_doctors(self) -> List[Dict[str, Any]]:
        """All doctors, newest first. Read failures yield an empty list."""
        try:
            doctors = [serialize_doctor(doc) for doc in self.collection.find().sort("created_at", DESCENDING)]
        except PyMongoError as e:
            logger.error(f"Error fetching doctors: {str(e)}")
            return []

        logger.info(f"Doctors fetched: {len(doctors)}")
        return doctors

    def get_doctor(self, doctor_id: str) -> Dict[str, Any]:
        object_id = to_object_id(doctor_id, "Doctor")
        try:
            doc = self.collection.find_one({"_id": object_id})
        except PyMongoError as e:
            logger.error(f"Error fetching doctor {doctor_id}: {str(e)}")
            raise StoreError(f"Failed to fetch doctor: {str(e)}") from e

        if not doc:
            raise NotFoundError(f"Doctor {doctor_id} not found")
        return serialize_doctor(doc)

    def delete_doctor(self, doctor_id: str, image_id: str) -> Dict[str, bool]:
        """Delete the profile image, then the record. The two deletes are not atomic."""
        object_id = to_object_id(doctor_id, "Doctor")
        try:
            exists = self.collection.find_one({"_id": object_id})
        except PyMongoError as e:
            logger.error(f"Error fetching doctor {doctor_id}: {str(e)}")
            raise StoreError(f"Failed to delete doctor: {str(e)}") from e

        if not exists:
            raise NotFoundError(f"Doctor {doctor_id} not found")

        self.storage.delete_file(image_id)

        try:
            result = self.collection.delete_one({"_id": object_id})
        except PyMongoError as e:
            logger.error(f"Error deleting doctor {doctor_id}: {str(e)}")
            raise StoreError(f"Failed to delete doctor: {str(e)}") from e

        if result.deleted_count == 0:
            raise NotFoundError(f"Doctor {doctor_id} not found")

        logger.info(f"Doctor deleted: {doctor_id}")
        return {"success": True}
