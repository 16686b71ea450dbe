# carepulse/core/config.py

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import List

from dotenv import load_dotenv

from carepulse.core.exceptions import ConfigurationError

load_dotenv()

REQUIRED_VARIABLES = [
    "MONGO_URI",
    "DATABASE_ID",
    "DOCTOR_COLLECTION_ID",
    "BUCKET_ID",
    "ENDPOINT",
    "PROJECT_ID",
]


@dataclass(frozen=True)
class Settings:
    mongo_uri: str
    database_id: str
    doctor_collection_id: str
    bucket_id: str
    endpoint: str
    project_id: str
    appointment_collection_id: str = "appointments"
    patient_collection_id: str = "patients"
    user_collection_id: str = "users"
    cors_origins: tuple = ("http://localhost:3000",)


def _read(name: str) -> str:
    value = os.getenv(name)
    # The web client exposes the endpoint under its public prefix
    if not value and name == "ENDPOINT":
        value = os.getenv("NEXT_PUBLIC_ENDPOINT")
    if not value and name == "BUCKET_ID":
        value = os.getenv("NEXT_PUBLIC_BUCKET_ID")
    return (value or "").strip()


def load_settings() -> Settings:
    """
    Build settings from the environment.

    Raises ConfigurationError naming every missing required variable.
    """
    values = {name: _read(name) for name in REQUIRED_VARIABLES}
    missing: List[str] = [name for name, value in values.items() if not value]
    if missing:
        raise ConfigurationError(
            f"Missing required configuration: {', '.join(missing)}"
        )

    origins = os.getenv("CORS_ORIGINS", "http://localhost:3000")

    return Settings(
        mongo_uri=values["MONGO_URI"],
        database_id=values["DATABASE_ID"],
        doctor_collection_id=values["DOCTOR_COLLECTION_ID"],
        bucket_id=values["BUCKET_ID"],
        endpoint=values["ENDPOINT"].rstrip("/"),
        project_id=values["PROJECT_ID"],
        appointment_collection_id=os.getenv("APPOINTMENT_COLLECTION_ID", "appointments"),
        patient_collection_id=os.getenv("PATIENT_COLLECTION_ID", "patients"),
        user_collection_id=os.getenv("USER_COLLECTION_ID", "users"),
        cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
