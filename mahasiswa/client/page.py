"""
The student page: one store, one form, the search term and the record
open in the detail overlay, wired together the way the screen uses them.
"""

import logging
from typing import Any, Optional, Sequence

from mahasiswa.client.form import CreateMode, EditMode, FormController
from mahasiswa.client.presenters import DetailView, ListView, present_detail, present_list
from mahasiswa.client.search import filter_students
from mahasiswa.client.store import Confirm, RecordStore
from mahasiswa.schemas.student import Student

logger = logging.getLogger(__name__)

# Where a dismiss interaction on the detail overlay came from
DISMISS_CLOSE = "close"
DISMISS_BACKDROP = "backdrop"
DISMISS_CONTENT = "content"


class StudentPage:

    def __init__(self, gateway, order_by: str = "Name"):
        self.store = RecordStore(gateway, order_by=order_by)
        self.form = FormController()
        self.search_term = ""
        self.viewing: Optional[Student] = None

    # =========================================================
    # Derived state
    # =========================================================

    @property
    def filtered(self) -> Sequence[Student]:
        return filter_students(self.store.records, self.search_term)

    def list_view(self) -> ListView:
        return present_list(self.filtered, self.store.loading, self.store.error, self.search_term)

    def detail_view(self) -> Optional[DetailView]:
        if self.viewing is None:
            return None
        return present_detail(self.viewing)

    # =========================================================
    # Intents
    # =========================================================

    async def open(self) -> bool:
        return await self.store.load()

    def search(self, term: Optional[str]) -> None:
        self.search_term = term or ""

    def view(self, record: Student) -> None:
        self.viewing = record

    def dismiss_detail(self, origin: str = DISMISS_CLOSE) -> None:
        """Clicks inside the detail panel itself never close it."""
        if origin == DISMISS_CONTENT:
            return
        self.viewing = None

    def edit(self, record: Student) -> None:
        self.store.edit_target = record
        self.form.set_mode(EditMode(record))

    def cancel_edit(self) -> None:
        self.store.edit_target = None
        self.form.cancel_edit()

    def change(self, field: str, value: Any) -> None:
        self.form.change(field, value)

    async def submit(self) -> bool:
        success = await self.form.submit(self.store)
        self._sync_form_mode()
        return success

    async def delete(self, nim: str, confirm: Confirm) -> bool:
        success = await self.store.remove(nim, confirm)
        if success:
            if self.viewing is not None and self.viewing.nim == nim:
                self.viewing = None
            self._sync_form_mode()
        return success

    def find(self, nim: str) -> Optional[Student]:
        return self.store.find(nim)

    def _sync_form_mode(self) -> None:
        # The store drops the edit target after a successful save
        if self.store.edit_target is None and self.form.is_edit_mode:
            self.form.set_mode(CreateMode())
