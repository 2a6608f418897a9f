from datetime import date
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Gender(str, Enum):
    MALE = "L"
    FEMALE = "P"

    @property
    def label(self) -> str:
        return "Laki-laki" if self is Gender.MALE else "Perempuan"


class StudentBase(BaseModel):
    """Fields use the wire names of the Mahasiswa collection as aliases."""

    nim: str = Field(alias="Nim")
    name: str = Field(alias="Name")
    gender: Gender = Field(default=Gender.MALE, alias="Gender")
    birth_date: date = Field(alias="BirthDate")
    address: str = Field(default="", alias="Address")
    contact: str = Field(default="", alias="Contact")
    status: bool = Field(default=True, alias="Status")

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    @field_validator("nim", "name")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    @field_validator("nim")
    @classmethod
    def single_path_segment(cls, v: str) -> str:
        # NIM is the last segment of /students/{nim}
        if "/" in v:
            raise ValueError("NIM tidak boleh mengandung '/'.")
        return v

    @field_validator("address", "contact", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        return "" if v is None else v

    def to_wire(self) -> dict:
        """JSON-ready payload keyed by wire names."""
        return self.model_dump(mode="json", by_alias=True)


class StudentCreate(StudentBase):
    pass


class StudentUpdate(StudentBase):
    pass


class Student(StudentBase):
    model_config = ConfigDict(populate_by_name=True, from_attributes=True, frozen=True)
