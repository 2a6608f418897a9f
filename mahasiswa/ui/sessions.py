import logging
import uuid
from collections import OrderedDict
from typing import Callable, Optional, Set, Tuple

from mahasiswa.client.gateway import StudentGateway
from mahasiswa.client.page import StudentPage

logger = logging.getLogger(__name__)

SESSION_COOKIE = "mahasiswa_session"
MAX_SESSIONS = 500


class PageRegistry:
    """
    One StudentPage per browser session, all sharing one gateway.

    The oldest session is dropped once MAX_SESSIONS is reached.
    """

    def __init__(self, gateway_factory: Callable[[], StudentGateway], max_sessions: int = MAX_SESSIONS):
        self._gateway_factory = gateway_factory
        self._gateway: Optional[StudentGateway] = None
        self._pages: "OrderedDict[str, StudentPage]" = OrderedDict()
        # sessions whose next request is the redirect after a form post
        self._redirected: Set[str] = set()
        self.max_sessions = max_sessions

    @property
    def gateway(self) -> StudentGateway:
        if self._gateway is None:
            self._gateway = self._gateway_factory()
        return self._gateway

    def __len__(self) -> int:
        return len(self._pages)

    def mark_redirect(self, session_id: str) -> None:
        """The next request of this session follows a redirect; it must not reload."""
        self._redirected.add(session_id)

    async def get(self, session_id: Optional[str], refresh: bool = False) -> Tuple[str, StudentPage]:
        """
        Existing page for the session, or a fresh page with its first load done.

        With ``refresh`` an existing page reloads its records, unless the
        request is the redirect that follows a form post: that one must still
        show the outcome (errors included) of the post.
        """
        if session_id and session_id in self._pages:
            self._pages.move_to_end(session_id)
            page = self._pages[session_id]
            if session_id in self._redirected:
                self._redirected.discard(session_id)
            elif refresh:
                await page.open()
            return session_id, page

        session_id = uuid.uuid4().hex
        page = StudentPage(self.gateway)
        self._pages[session_id] = page
        while len(self._pages) > self.max_sessions:
            evicted, _ = self._pages.popitem(last=False)
            self._redirected.discard(evicted)
            logger.debug(f"Evicted page session {evicted}")

        await page.open()
        return session_id, page

    async def close(self) -> None:
        self._pages.clear()
        self._redirected.clear()
        if self._gateway is not None:
            await self._gateway.aclose()
            self._gateway = None
