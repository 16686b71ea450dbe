# carepulse/db/storage.py

from typing import Optional, Tuple

from bson import ObjectId
from bson.errors import InvalidId
from gridfs.errors import NoFile
from pymongo.errors import PyMongoError

from carepulse.core.exceptions import NotFoundError, StoreError
from carepulse.core.logger import get_module_logger

logger = get_module_logger(__name__)


def to_object_id(value: str, kind: str = "Document") -> ObjectId:
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        raise NotFoundError(f"{kind} {value} not found")


class ObjectStorage:
    """
    Binary object store on top of a GridFS bucket.

    Files are addressed by the string form of their GridFS id, and exposed
    through a view URL built from the configured endpoint, bucket and project.
    """

    def __init__(self, bucket, settings):
        if bucket is None:
            raise ValueError("GridFS bucket is required")
        self.bucket = bucket
        self.settings = settings

    def create_file(self, data: bytes, filename: str, content_type: Optional[str] = None) -> str:
        try:
            file_id = self.bucket.upload_from_stream(
                filename,
                data,
                metadata={"content_type": content_type or "application/octet-stream"},
            )
        except PyMongoError as e:
            logger.error(f"Error uploading {filename} to bucket {self.settings.bucket_id}: {str(e)}")
            raise StoreError(f"Failed to store file {filename}: {str(e)}") from e

        logger.info(f"Stored file {file_id} in bucket {self.settings.bucket_id}")
        return str(file_id)

    def delete_file(self, file_id: str) -> None:
        object_id = to_object_id(file_id, "File")
        try:
            self.bucket.delete(object_id)
        except NoFile as e:
            raise NotFoundError(f"File {file_id} not found") from e
        except PyMongoError as e:
            logger.error(f"Error deleting file {file_id}: {str(e)}")
            raise StoreError(f"Failed to delete file {file_id}: {str(e)}") from e

        logger.info(f"Deleted file {file_id} from bucket {self.settings.bucket_id}")

    def read_file(self, file_id: str) -> Tuple[bytes, str]:
        """Return the file contents and their content type."""
        object_id = to_object_id(file_id, "File")
        try:
            grid_out = self.bucket.open_download_stream(object_id)
            data = grid_out.read()
        except NoFile as e:
            raise NotFoundError(f"File {file_id} not found") from e
        except PyMongoError as e:
            logger.error(f"Error reading file {file_id}: {str(e)}")
            raise StoreError(f"Failed to read file {file_id}: {str(e)}") from e

        metadata = grid_out.metadata or {}
        return data, metadata.get("content_type", "application/octet-stream")

    def file_url(self, file_id: str) -> str:
        return (
            f"{self.settings.endpoint}/storage/buckets/{self.settings.bucket_id}"
            f"/files/{file_id}/view?project={self.settings.project_id}"
        )
