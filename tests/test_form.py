from datetime import date

import pytest
from pydantic import ValidationError

from mahasiswa.client.form import (
    CreateMode,
    EditMode,
    FormController,
    INVALID_BIRTH_DATE,
    coerce_status,
    default_buffer,
)
from mahasiswa.client.store import RecordStore
from mahasiswa.core.exceptions import FieldLockedError


def fill(form, nim="C3", name="Citra", birth_date="2002-02-02"):
    form.change("Nim", nim)
    form.change("Name", name)
    form.change("BirthDate", birth_date)


# === coercion ===


def test_status_coercion_is_exact():
    assert coerce_status("true") is True
    assert coerce_status("false") is False


@pytest.mark.parametrize("value", ["True", "1", "yes", "", "on", 1, 0, None])
def test_status_coercion_rejects_anything_else(value):
    with pytest.raises(ValueError):
        coerce_status(value)


def test_status_change_stores_bool():
    form = FormController()
    form.change("Status", "false")
    assert form.buffer["Status"] is False
    form.change("Status", "true")
    assert form.buffer["Status"] is True


def test_invalid_status_leaves_buffer_alone():
    form = FormController()
    with pytest.raises(ValueError):
        form.change("Status", "maybe")
    assert form.buffer["Status"] is True


# === modes ===


def test_create_mode_starts_with_defaults():
    form = FormController()
    assert isinstance(form.mode, CreateMode)
    assert form.buffer == default_buffer()
    assert form.buffer["Gender"] == "L"
    assert form.buffer["Status"] is True
    assert form.title == "Tambah Data Baru"


def test_edit_mode_snapshots_record_and_locks_nim(alice):
    form = FormController(EditMode(alice))
    assert form.is_edit_mode
    assert form.buffer["Nim"] == "A1"
    assert form.buffer["BirthDate"] == "2001-08-17"
    assert form.title == "Edit Data Mahasiswa"
    with pytest.raises(FieldLockedError):
        form.change("Nim", "Z9")
    assert form.buffer["Nim"] == "A1"


def test_switching_mode_resets_buffer_and_errors(alice):
    form = FormController()
    form.change("Name", "draft")
    form.validate()
    assert form.errors

    form.set_mode(EditMode(alice))
    assert form.errors == {}
    assert form.buffer["Name"] == "Alice"

    form.cancel_edit()
    assert form.buffer == default_buffer()
    assert form.errors == {}


def test_change_replaces_only_one_field():
    form = FormController()
    fill(form)
    before = dict(form.buffer)
    form.change("Address", "Jl. Baru")
    assert form.buffer == {**before, "Address": "Jl. Baru"}


def test_unknown_field_is_rejected():
    with pytest.raises(KeyError):
        FormController().change("Email", "x@example.com")


def test_gender_accepts_only_known_codes():
    form = FormController()
    form.change("Gender", "P")
    assert form.buffer["Gender"] == "P"
    with pytest.raises(ValueError):
        form.change("Gender", "X")


# === validation ===


def test_empty_form_reports_all_required_fields():
    form = FormController()
    assert form.validate() is False
    assert form.errors == {
        "Nim": "Nim tidak boleh kosong.",
        "Name": "Nama tidak boleh kosong.",
        "BirthDate": "Tanggal Lahir tidak boleh kosong.",
    }


@pytest.mark.parametrize("missing", ["Nim", "Name", "BirthDate"])
def test_each_required_field_blocks(missing):
    form = FormController()
    fill(form)
    form.change(missing, "   ")
    assert form.validate() is False
    assert set(form.errors) == {missing}


def test_required_fields_are_enough():
    form = FormController()
    fill(form)
    form.change("Address", "")
    form.change("Contact", "")
    form.change("Status", "false")
    form.change("Gender", "P")
    assert form.validate() is True
    assert form.errors == {}


def test_malformed_birth_date_is_a_field_error():
    form = FormController()
    fill(form, birth_date="2002-13-40")
    with pytest.raises(ValidationError):
        form.to_record()
    assert form.errors == {"BirthDate": INVALID_BIRTH_DATE}


def test_nim_with_slash_is_a_field_error():
    form = FormController()
    fill(form, nim="A/1")
    with pytest.raises(ValidationError):
        form.to_record()
    assert list(form.errors) == ["Nim"]
    assert "/" in form.errors["Nim"]


# === submit ===


@pytest.mark.anyio
async def test_invalid_submit_never_reaches_store(empty_gateway):
    store = RecordStore(empty_gateway)
    form = FormController()
    form.change("Name", "No Nim")

    assert await form.submit(store) is False
    assert empty_gateway.calls == []
    assert store.error is None


@pytest.mark.anyio
async def test_successful_create_resets_buffer(empty_gateway):
    store = RecordStore(empty_gateway)
    form = FormController()
    fill(form)

    assert await form.submit(store) is True
    assert form.buffer == default_buffer()
    assert [r.nim for r in store.records] == ["C3"]
    assert store.records[0].birth_date == date(2002, 2, 2)


@pytest.mark.anyio
async def test_failed_create_keeps_buffer(empty_gateway):
    empty_gateway.fail["insert"] = "boom"
    store = RecordStore(empty_gateway)
    form = FormController()
    fill(form)

    assert await form.submit(store) is False
    assert form.buffer["Nim"] == "C3"
    assert store.error == "boom"
    assert form.errors == {}


@pytest.mark.anyio
async def test_successful_edit_keeps_buffer(gateway, alice):
    store = RecordStore(gateway)
    await store.load()
    form = FormController(EditMode(alice))
    form.change("Name", "New Name")

    assert await form.submit(store) is True
    assert form.buffer["Name"] == "New Name"
    assert gateway.ops()[-2:] == ["update", "select"]
