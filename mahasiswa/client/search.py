from typing import Sequence

from mahasiswa.schemas.student import Student


def filter_students(records: Sequence[Student], term: str) -> Sequence[Student]:
    """
    Records whose name or NIM contains ``term``, ignoring case.

    An empty term returns ``records`` itself. Order is kept as given.
    """
    if not term:
        return records
    needle = term.lower()
    return [
        record for record in records
        if needle in record.name.lower() or needle in record.nim.lower()
    ]
