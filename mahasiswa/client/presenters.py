"""
List and detail presenters.

Pure functions from page state to view models; templates only read the
view models. No presenter touches the store.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Sequence, Union

from mahasiswa.schemas.student import Gender, Student

LOADING_MESSAGE = "Memuat data..."
EMPTY_MESSAGE = "Belum ada data mahasiswa."
NO_MATCH_MESSAGE = "Data tidak ditemukan."
PLACEHOLDER = "-"

MONTHS_ID = (
    "Januari", "Februari", "Maret", "April", "Mei", "Juni",
    "Juli", "Agustus", "September", "Oktober", "November", "Desember",
)


@dataclass(frozen=True)
class StatusBadge:
    label: str
    css_class: str


def gender_label(gender: Union[Gender, str]) -> str:
    return Gender(gender).label


def status_badge(active: bool) -> StatusBadge:
    if active:
        return StatusBadge("Aktif", "status-active")
    return StatusBadge("Tidak Aktif", "status-inactive")


def format_birth_date(value: Union[date, str]) -> str:
    """Long Indonesian date, e.g. 17 Agustus 2001. Unparseable text is returned as is."""
    if isinstance(value, str):
        try:
            value = date.fromisoformat(value)
        except ValueError:
            return value
    return f"{value.day} {MONTHS_ID[value.month - 1]} {value.year}"


# =========================================================
# List
# =========================================================

@dataclass(frozen=True)
class StudentRow:
    nim: str
    name: str
    gender: str
    status: StatusBadge


@dataclass(frozen=True)
class ListView:
    rows: List[StudentRow] = field(default_factory=list)
    loading: bool = False
    error: Optional[str] = None
    empty_message: Optional[str] = None

    @property
    def message(self) -> Optional[str]:
        if self.loading:
            return LOADING_MESSAGE
        return self.error or self.empty_message


def present_list(
    records: Sequence[Student],
    loading: bool,
    error: Optional[str],
    search_term: str = "",
) -> ListView:
    """
    Loading wins over error, error wins over rows. The empty state says
    whether nothing exists or nothing matched the search.
    """
    if loading:
        return ListView(loading=True)
    if error:
        return ListView(error=error)
    if not records:
        return ListView(empty_message=NO_MATCH_MESSAGE if search_term else EMPTY_MESSAGE)
    return ListView(rows=[
        StudentRow(
            nim=record.nim,
            name=record.name,
            gender=gender_label(record.gender),
            status=status_badge(record.status),
        )
        for record in records
    ])


# =========================================================
# Detail
# =========================================================

@dataclass(frozen=True)
class DetailView:
    nim: str
    name: str
    gender: str
    birth_date: str
    address: str
    contact: str
    status: StatusBadge

    def items(self):
        """(label, value) pairs in display order; status is rendered as a badge."""
        return [
            ("NIM", self.nim),
            ("Nama Lengkap", self.name),
            ("Jenis Kelamin", self.gender),
            ("Tanggal Lahir", self.birth_date),
            ("Alamat", self.address),
            ("Kontak", self.contact),
        ]


def present_detail(record: Student) -> DetailView:
    return DetailView(
        nim=record.nim,
        name=record.name,
        gender=gender_label(record.gender),
        birth_date=format_birth_date(record.birth_date),
        address=record.address or PLACEHOLDER,
        contact=record.contact or PLACEHOLDER,
        status=status_badge(record.status),
    )
