import httpx
import pytest

from mahasiswa.client.gateway import StudentGateway, UNKNOWN_ERROR_MESSAGE, error_from_payload
from mahasiswa.client.page import StudentPage
from mahasiswa.main import app


@pytest.fixture
async def live_gateway(fresh_db):
    gateway = StudentGateway.connect(app=app)
    yield gateway
    await gateway.aclose()


def test_error_from_service_envelope():
    error = error_from_payload(
        {"success": False, "error": {"code": "CONFLICT", "message": "NIM 1 sudah terdaftar."}}, 409
    )
    assert error.message == "NIM 1 sudah terdaftar."
    assert error.code == "CONFLICT"
    assert error.status_code == 409


def test_error_from_detail_and_unknown_shapes():
    assert error_from_payload({"detail": "Not Found"}).message == "Not Found"
    assert error_from_payload({"message": "nope"}).message == "nope"
    assert error_from_payload(["weird"]).message == UNKNOWN_ERROR_MESSAGE
    assert error_from_payload(None).message == UNKNOWN_ERROR_MESSAGE


@pytest.mark.anyio
async def test_transport_failure_becomes_gateway_error():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(refuse), base_url="http://db/students")
    gateway = StudentGateway(client)

    result = await gateway.select()
    assert result.ok is False
    assert result.error.message == "connection refused"
    await gateway.aclose()


@pytest.mark.anyio
async def test_non_json_error_body_gets_fallback_message():
    client = httpx.AsyncClient(
        transport=httpx.MockTransport(lambda request: httpx.Response(502, text="Bad Gateway")),
        base_url="http://db/students",
    )
    result = await StudentGateway(client).delete("Nim", "A1")
    assert result.error.message == UNKNOWN_ERROR_MESSAGE
    assert result.error.status_code == 502
    await client.aclose()


@pytest.mark.anyio
async def test_only_nim_key_is_supported(live_gateway):
    result = await live_gateway.delete("Name", "Alice")
    assert result.error.message == "Cannot delete by 'Name'"


@pytest.mark.anyio
async def test_crud_through_the_service(live_gateway, make_payload):
    assert (await live_gateway.select()).data == []

    inserted = await live_gateway.insert([make_payload("B2", "Bob"), make_payload("A1", "Alice")])
    assert inserted.ok

    names = [row["Name"] for row in (await live_gateway.select()).data]
    assert names == ["Alice", "Bob"]

    updated = await live_gateway.update(make_payload("A1", "Alicia"), key="Nim", value="A1")
    assert updated.data["Name"] == "Alicia"

    deleted = await live_gateway.delete("Nim", "B2")
    assert deleted.ok and deleted.data is None
    assert [row["Nim"] for row in (await live_gateway.select()).data] == ["A1"]


@pytest.mark.anyio
async def test_duplicate_insert_surfaces_service_message(live_gateway, make_payload):
    await live_gateway.insert([make_payload("A1", "Alice")])
    result = await live_gateway.insert([make_payload("A1", "Alice again")])
    assert result.error.message == "NIM A1 sudah terdaftar."
    assert result.error.code == "CONFLICT"


@pytest.mark.anyio
async def test_page_against_the_real_service(live_gateway):
    page = StudentPage(live_gateway)
    assert await page.open() is True
    assert page.list_view().empty_message == "Belum ada data mahasiswa."

    for field, value in {"Nim": "A1", "Name": "Alice", "BirthDate": "2001-08-17", "Status": "false"}.items():
        page.change(field, value)
    assert await page.submit() is True
    assert [(r.nim, r.status) for r in page.store.records] == [("A1", False)]

    page.change("Nim", "A1")
    page.change("Name", "Duplicate")
    page.change("BirthDate", "2001-08-17")
    assert await page.submit() is False
    assert page.list_view().error == "NIM A1 sudah terdaftar."

    assert await page.delete("A1", lambda: True) is True
    assert page.store.records == []
    assert page.store.error is None
