# tests/conftest.py

import os

# Settings are read at import time; point them at a throwaway database first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.pop("GATEWAY_BASE_URL", None)

from datetime import date

import pytest
from fastapi.testclient import TestClient

from mahasiswa.client.gateway import GatewayError, GatewayResponse
from mahasiswa.core.database import create_database_tables, drop_database_tables
from mahasiswa.main import app
from mahasiswa.schemas.student import Gender, Student


class FakeGateway:
    """
    In-memory stand-in for the students collection.

    ``fail`` maps an operation name (select/insert/update/delete) to the
    error message its next call should return.
    """

    def __init__(self, rows=None):
        self.rows = {row["Nim"]: dict(row) for row in rows or []}
        self.calls = []
        self.fail = {}

    def _failure(self, op):
        if op in self.fail:
            return GatewayResponse(error=GatewayError(message=self.fail.pop(op)))
        return None

    async def select(self, order_by="Name", ascending=True):
        self.calls.append(("select", order_by, ascending))
        failure = self._failure("select")
        if failure:
            return failure
        rows = sorted(self.rows.values(), key=lambda r: (r[order_by], r["Nim"]), reverse=not ascending)
        return GatewayResponse(data=[dict(r) for r in rows])

    async def insert(self, rows):
        self.calls.append(("insert", rows))
        failure = self._failure("insert")
        if failure:
            return failure
        for row in rows:
            if row["Nim"] in self.rows:
                return GatewayResponse(error=GatewayError(message=f"NIM {row['Nim']} sudah terdaftar."))
        for row in rows:
            self.rows[row["Nim"]] = dict(row)
        return GatewayResponse(data=rows)

    async def update(self, values, key, value):
        self.calls.append(("update", values, key, value))
        failure = self._failure("update")
        if failure:
            return failure
        self.rows[value] = dict(values)
        return GatewayResponse(data=values)

    async def delete(self, key, value):
        self.calls.append(("delete", key, value))
        failure = self._failure("delete")
        if failure:
            return failure
        self.rows.pop(value, None)
        return GatewayResponse(data=None)

    def ops(self):
        return [call[0] for call in self.calls]


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def alice():
    return Student(
        nim="A1",
        name="Alice",
        gender=Gender.FEMALE,
        birth_date=date(2001, 8, 17),
        address="Jl. Mawar 1",
        contact="0811111111",
        status=True,
    )


@pytest.fixture
def bob():
    return Student(
        nim="B2",
        name="Bob",
        gender=Gender.MALE,
        birth_date=date(2000, 1, 5),
        status=False,
    )


@pytest.fixture
def gateway(alice, bob):
    return FakeGateway([alice.to_wire(), bob.to_wire()])


@pytest.fixture
def empty_gateway():
    return FakeGateway()


@pytest.fixture
def fresh_db():
    drop_database_tables()
    create_database_tables()
    yield
    drop_database_tables()


@pytest.fixture
def client(fresh_db):
    with TestClient(app) as test_client:
        yield test_client


def student_payload(nim="2201001", name="Andi Saputra", **overrides):
    payload = {
        "Nim": nim,
        "Name": name,
        "Gender": "L",
        "BirthDate": "2003-04-12",
        "Address": "Jl. Merdeka 10",
        "Contact": "081234567890",
        "Status": True,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def make_payload():
    return student_payload
