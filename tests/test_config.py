import pytest

from carepulse.core.config import REQUIRED_VARIABLES, load_settings
from carepulse.core.exceptions import ConfigurationError


@pytest.fixture
def env(monkeypatch):
    for name in REQUIRED_VARIABLES + ["NEXT_PUBLIC_ENDPOINT", "NEXT_PUBLIC_BUCKET_ID"]:
        monkeypatch.delenv(name, raising=False)
    values = {
        "MONGO_URI": "mongodb://localhost:27017",
        "DATABASE_ID": "carepulse",
        "DOCTOR_COLLECTION_ID": "doctors",
        "BUCKET_ID": "images",
        "ENDPOINT": "https://cloud.example.com/v1/",
        "PROJECT_ID": "proj",
    }
    for name, value in values.items():
        monkeypatch.setenv(name, value)
    return monkeypatch


def test_load_settings(env):
    settings = load_settings()
    assert settings.endpoint == "https://cloud.example.com/v1"
    assert settings.appointment_collection_id == "appointments"


def test_public_endpoint_alias(env):
    env.delenv("ENDPOINT")
    env.setenv("NEXT_PUBLIC_ENDPOINT", "https://public.example.com")
    assert load_settings().endpoint == "https://public.example.com"


def test_missing_variables_are_all_named(env):
    env.delenv("BUCKET_ID")
    env.setenv("PROJECT_ID", "  ")

    with pytest.raises(ConfigurationError) as exc:
        load_settings()
    assert "BUCKET_ID" in exc.value.message
    assert "PROJECT_ID" in exc.value.message
    assert "DATABASE_ID" not in exc.value.message
