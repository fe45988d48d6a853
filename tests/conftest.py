"""Pytest configuration and fixtures for his-commons tests."""

from typing import ClassVar, Optional

import pytest
import pytest_asyncio
from mongomock_motor import AsyncMongoMockClient

from his_commons.core.shared import AuditUser, RequestContext
from his_commons.models import BaseEntity
from his_commons.repositories import BaseRepository


class Patient(BaseEntity):
    """Minimal domain entity used across the test suite."""
    
    collection_name: ClassVar[Optional[str]] = "patients"
    
    name: str
    mrn: Optional[str] = None
    department: Optional[str] = None
    age: Optional[int] = None


class PatientRepository(BaseRepository[Patient]):
    """Domain repository composed on the public BaseRepository API."""
    
    searchable_fields = ("name", "mrn")
    filterable_fields = frozenset({"name", "mrn", "department", "age", "active"})
    
    def __init__(self, collection):
        super().__init__(collection, Patient)
    
    async def find_active_by_mrn(self, mrn: str) -> Optional[Patient]:
        return await self.find_one({"mrn": mrn, "active": True})


@pytest.fixture
def mongo_client():
    """In-memory motor-compatible client."""
    return AsyncMongoMockClient()


@pytest.fixture
def patients_collection(mongo_client):
    return mongo_client["his_test"]["patients"]


@pytest.fixture
def repository(patients_collection):
    return PatientRepository(patients_collection)


@pytest.fixture
def doctor_context():
    """Context of an authenticated clinician."""
    return RequestContext(
        user=AuditUser(id="user-1", name="Dr. Ada Lovelace"),
        tenant_id="tenant-1",
    )


@pytest.fixture
def nurse_context_mapping():
    """Context supplied as a plain mapping with only a username."""
    return {"user": {"id": "user-2", "username": "nurse.joy"}, "tenantId": "tenant-2"}


@pytest_asyncio.fixture
async def seeded_repository(repository):
    """Repository holding 25 active patients named Patient 01..25."""
    for number in range(1, 26):
        await repository.create({
            "name": f"Patient {number:02d}",
            "mrn": f"MRN-{number:04d}",
            "department": "cardiology" if number % 2 else "oncology",
            "age": 20 + number,
        })
    return repository
