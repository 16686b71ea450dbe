# carepulse/db/client.py

from functools import lru_cache

from fastapi import Depends
from gridfs import GridFSBucket
from pymongo import MongoClient

from carepulse.core.config import Settings, get_settings
from carepulse.core.logger import logger
from carepulse.db.storage import ObjectStorage


@lru_cache(maxsize=1)
def get_client() -> MongoClient:
    settings = get_settings()
    client = MongoClient(settings.mongo_uri)
    logger.info(f"MongoDB client created for database {settings.database_id}")
    return client


def get_db(settings: Settings = Depends(get_settings)):
    return get_client()[settings.database_id]


def get_storage(db=Depends(get_db), settings: Settings = Depends(get_settings)) -> ObjectStorage:
    bucket = GridFSBucket(db, bucket_name=settings.bucket_id)
    return ObjectStorage(bucket, settings)


def init_db():
    """Ping the server and make sure the listing indexes exist."""
    settings = get_settings()
    db = get_client()[settings.database_id]
    db.command("ping")
    db[settings.doctor_collection_id].create_index([("created_at", -1)])
    db[settings.appointment_collection_id].create_index([("created_at", -1)])
    db[settings.user_collection_id].create_index("email", unique=True)
    db[settings.patient_collection_id].create_index("user_id", unique=True)
    logger.info(f"MongoDB connected to {settings.database_id}")
