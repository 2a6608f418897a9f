"""
Record Store: the page's in-memory copy of the Mahasiswa collection.

Holds the records from the last successful fetch, the shared loading flag
and the single error slot. Every mutation is followed by a full reload;
nothing is applied to the local list speculatively.
"""

import inspect
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Dict, List, Optional, Union

from pydantic import ValidationError

from mahasiswa.client.gateway import StudentGateway, UNKNOWN_ERROR_MESSAGE
from mahasiswa.schemas.student import Student

logger = logging.getLogger(__name__)

BUSY_MESSAGE = "Operasi lain sedang berjalan."
DELETE_CONFIRMATION = "Apakah Anda yakin ingin menghapus data ini?"

Confirm = Callable[[], Union[bool, Awaitable[bool]]]


class RequestStatus(str, Enum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class RequestState:
    status: RequestStatus = RequestStatus.IDLE
    message: Optional[str] = None

    @classmethod
    def in_flight(cls) -> "RequestState":
        return cls(RequestStatus.IN_FLIGHT)

    @classmethod
    def succeeded(cls) -> "RequestState":
        return cls(RequestStatus.SUCCEEDED)

    @classmethod
    def failed(cls, message: str) -> "RequestState":
        return cls(RequestStatus.FAILED, message)


class RecordStore:
    """
    Args:
        gateway: the remote collection (anything with async select/insert/
            update/delete returning GatewayResponse).
        order_by: column the collection is fetched in, ascending.
    """

    OPERATIONS = ("load", "save", "remove")

    def __init__(self, gateway: StudentGateway, order_by: str = "Name"):
        self.gateway = gateway
        self.order_by = order_by
        self.records: List[Student] = []
        self.error: Optional[str] = None
        self.edit_target: Optional[Student] = None
        self.states: Dict[str, RequestState] = {op: RequestState() for op in self.OPERATIONS}
        self._in_flight = 0
        self._mutating = False

    @property
    def loading(self) -> bool:
        return self._in_flight > 0

    @property
    def busy(self) -> bool:
        """A save or remove is waiting on the gateway."""
        return self._mutating

    @asynccontextmanager
    async def _operation(self, name: str):
        self._in_flight += 1
        self.states[name] = RequestState.in_flight()
        try:
            yield
        finally:
            self._in_flight -= 1

    def _fail(self, name: str, message: Optional[str]) -> bool:
        self.error = message or UNKNOWN_ERROR_MESSAGE
        self.states[name] = RequestState.failed(self.error)
        return False

    # =========================================================
    # Operations
    # =========================================================

    async def load(self) -> bool:
        """Fetch the whole collection. The previous list survives a failure."""
        async with self._operation("load"):
            self.error = None
            result = await self.gateway.select(order_by=self.order_by, ascending=True)
            if not result.ok:
                logger.warning(f"Load failed: {result.error.message}")
                return self._fail("load", result.error.message)

            try:
                records = [Student.model_validate(row) for row in result.data or []]
            except ValidationError as e:
                logger.error(f"Load returned malformed rows: {e}")
                return self._fail("load", f"Invalid data received: {e.error_count()} error(s)")

            self.records = records
            self.states["load"] = RequestState.succeeded()
            logger.debug(f"Loaded {len(records)} record(s)")
            return True

    async def save(self, record: Student, is_edit_mode: bool) -> bool:
        """
        Update (edit mode, keyed by NIM) or insert a one-element batch.

        Returns True when the write succeeded; the reload that follows may
        still fail and set the error on its own.
        """
        if self._mutating:
            return self._fail("save", BUSY_MESSAGE)

        self._mutating = True
        try:
            async with self._operation("save"):
                payload = record.to_wire()
                if is_edit_mode:
                    result = await self.gateway.update(payload, key="Nim", value=record.nim)
                else:
                    result = await self.gateway.insert([payload])

                if not result.ok:
                    logger.warning(f"Save of {record.nim} failed: {result.error.message}")
                    return self._fail("save", result.error.message)

                logger.info(f"{'Updated' if is_edit_mode else 'Inserted'} {record.nim}")
                self.states["save"] = RequestState.succeeded()
                self.edit_target = None
                await self.load()
                return True
        finally:
            self._mutating = False

    async def remove(self, nim: str, confirm: Confirm) -> bool:
        """
        Delete by NIM once ``confirm`` answers yes, then reload.

        Returns False when the user declined or the delete failed.
        """
        answer = confirm()
        if inspect.isawaitable(answer):
            answer = await answer
        if not answer:
            logger.debug(f"Delete of {nim} cancelled")
            return False

        if self._mutating:
            return self._fail("remove", BUSY_MESSAGE)

        self._mutating = True
        try:
            async with self._operation("remove"):
                result = await self.gateway.delete(key="Nim", value=nim)
                if not result.ok:
                    logger.warning(f"Delete of {nim} failed: {result.error.message}")
                    return self._fail("remove", result.error.message)

                logger.info(f"Deleted {nim}")
                self.states["remove"] = RequestState.succeeded()
                if self.edit_target is not None and self.edit_target.nim == nim:
                    self.edit_target = None
                await self.load()
                return True
        finally:
            self._mutating = False

    def find(self, nim: str) -> Optional[Student]:
        for record in self.records:
            if record.nim == nim:
                return record
        return None
