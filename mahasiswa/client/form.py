"""
Form Controller: the edit buffer behind the add/edit form.

The buffer is a dict keyed by wire field names holding what the inputs
hold (strings, plus a real bool for Status). It is only turned into a
Student record on submit, after the required-field checks pass.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from mahasiswa.core.exceptions import FieldLockedError
from mahasiswa.schemas.student import Gender, Student

logger = logging.getLogger(__name__)

FIELDS = ("Nim", "Name", "Gender", "BirthDate", "Address", "Contact", "Status")

REQUIRED_MESSAGES = {
    "Nim": "Nim tidak boleh kosong.",
    "Name": "Nama tidak boleh kosong.",
    "BirthDate": "Tanggal Lahir tidak boleh kosong.",
}
INVALID_BIRTH_DATE = "Tanggal Lahir tidak valid."


@dataclass(frozen=True)
class CreateMode:
    pass


@dataclass(frozen=True)
class EditMode:
    record: Student


FormMode = Union[CreateMode, EditMode]


def default_buffer() -> Dict[str, Any]:
    return {
        "Nim": "",
        "Name": "",
        "Gender": Gender.MALE.value,
        "BirthDate": "",
        "Address": "",
        "Contact": "",
        "Status": True,
    }


def coerce_status(value: Union[str, bool]) -> bool:
    """The status selector posts "true"/"false"; nothing else is a status."""
    if value is True or value == "true":
        return True
    if value is False or value == "false":
        return False
    raise ValueError(f"Invalid status value: {value!r}")


class FormController:

    def __init__(self, mode: Optional[FormMode] = None):
        self.mode: FormMode = CreateMode()
        self.buffer: Dict[str, Any] = default_buffer()
        self.errors: Dict[str, str] = {}
        self.set_mode(mode or CreateMode())

    @property
    def is_edit_mode(self) -> bool:
        return isinstance(self.mode, EditMode)

    @property
    def title(self) -> str:
        return "Edit Data Mahasiswa" if self.is_edit_mode else "Tambah Data Baru"

    def is_locked(self, field: str) -> bool:
        return field == "Nim" and self.is_edit_mode

    def set_mode(self, mode: FormMode) -> None:
        """Switch mode; the buffer and the errors always start over."""
        if isinstance(mode, EditMode):
            self.buffer = mode.record.to_wire()
        elif isinstance(mode, CreateMode):
            self.buffer = default_buffer()
        else:
            raise TypeError(f"Unknown form mode: {mode!r}")
        self.mode = mode
        self.errors = {}

    def cancel_edit(self) -> None:
        self.set_mode(CreateMode())

    def change(self, field: str, value: Any) -> None:
        """Replace one buffer field; the rest of the buffer is untouched."""
        if field not in FIELDS:
            raise KeyError(field)
        if self.is_locked(field):
            raise FieldLockedError(field)

        if field == "Status":
            value = coerce_status(value)
        elif field == "Gender":
            value = Gender(value).value
        elif value is None:
            value = ""
        self.buffer = {**self.buffer, field: value}

    def validate(self) -> bool:
        errors = {}
        for field, message in REQUIRED_MESSAGES.items():
            if not str(self.buffer.get(field) or "").strip():
                errors[field] = message
        self.errors = errors
        return not errors

    def to_record(self) -> Student:
        try:
            return Student.model_validate(self.buffer)
        except ValidationError as e:
            errors = {}
            for error in e.errors():
                field = str(error["loc"][0]) if error["loc"] else "form"
                if field == "BirthDate":
                    errors[field] = INVALID_BIRTH_DATE
                else:
                    errors[field] = error["msg"]
            self.errors = errors
            raise

    async def submit(self, store) -> bool:
        """
        Validate, then hand the record to ``store.save``.

        Nothing reaches the store while a field error is present. A
        successful create clears the buffer; an edit buffer is kept.
        """
        if not self.validate():
            logger.debug(f"Form blocked: {sorted(self.errors)}")
            return False
        try:
            record = self.to_record()
        except ValidationError:
            return False

        is_edit_mode = self.is_edit_mode
        success = await store.save(record, is_edit_mode)
        if success and not is_edit_mode:
            self.buffer = default_buffer()
        return success
