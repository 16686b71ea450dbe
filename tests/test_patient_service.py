from datetime import date

import pytest

from carepulse.core.exceptions import NotFoundError, ValidationError
from carepulse.services.patient_service import PatientService


@pytest.fixture
def service(db, settings):
    return PatientService(db, settings)


@pytest.fixture
def patient_form():
    return {
        "name": "Ali Khan",
        "email": "ali@example.com",
        "phone": "0300 1234567",
        "birthDate": "1990-01-01",
        "gender": "Male",
        "address": "12 Mall Road, Lahore",
        "occupation": "Engineer",
        "emergencyContactName": "Sara Khan",
        "emergencyContactNumber": "+923001234568",
        "primaryPhysician": "Dr. A",
        "insuranceProvider": "State Life",
        "insurancePolicyNumber": "SL-001",
        "treatmentConsent": True,
        "disclosureConsent": True,
        "privacyConsent": True,
    }


def test_create_user_is_idempotent_by_email(service, db):
    first = service.create_user({"name": "Ali Khan", "email": "Ali@Example.com", "phone": "0300-1234567"})
    second = service.create_user({"name": "Ali Khan", "email": "ali@example.com", "phone": "03001234567"})

    assert first["id"] == second["id"]
    assert first["phone"] == "03001234567"
    assert len(db["users"].docs) == 1


def test_create_user_validates(service, db):
    with pytest.raises(ValidationError):
        service.create_user({"name": "A", "email": "ali@example.com", "phone": "03001234567"})
    assert db["users"].calls == []


def test_register_and_fetch_patient(service, patient_form):
    user = service.create_user({"name": "Ali Khan", "email": "ali@example.com", "phone": "03001234567"})

    patient = service.register_patient(user["id"], patient_form)
    fetched = service.get_patient(user["id"])

    assert fetched["id"] == patient["id"]
    assert fetched["birth_date"] == date(1990, 1, 1)
    assert service.get_patients_by_id([patient["id"], "bogus"]) == {patient["id"]: fetched}


def test_register_patient_for_unknown_user(service, patient_form):
    with pytest.raises(NotFoundError):
        service.register_patient("000000000000000000000000", patient_form)


def test_missing_patient(service):
    with pytest.raises(NotFoundError):
        service.get_patient("nobody")


def test_registering_twice_is_a_validation_error(db, settings, patient_form, unique_collection):
    db.collections["patients"] = unique_collection("user_id")
    service = PatientService(db, settings)
    user = service.create_user({"name": "Ali Khan", "email": "ali@example.com", "phone": "03001234567"})
    service.register_patient(user["id"], patient_form)

    with pytest.raises(ValidationError) as exc:
        service.register_patient(user["id"], patient_form)
    assert "user_id" in exc.value.errors


def test_concurrent_user_creation_returns_existing(db, settings, unique_collection):
    users = db.collections["users"] = unique_collection("email")
    service = PatientService(db, settings)
    first = service.create_user({"name": "Ali Khan", "email": "ali@example.com", "phone": "03001234567"})

    # The existence check misses once, as if another request inserted in between
    real_find_one = users.find_one
    misses = [True]

    def find_one(query=None):
        if misses:
            misses.pop()
            return None
        return real_find_one(query)

    users.find_one = find_one

    second = service.create_user({"name": "Ali Khan", "email": "ali@example.com", "phone": "03001234567"})
    assert second["id"] == first["id"]
    assert len(users.docs) == 1
