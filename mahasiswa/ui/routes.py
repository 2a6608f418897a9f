"""
HTML routes of the single student page.

Every POST answers with a 303 back to ``/``; the page state (form buffer,
errors, search term, open detail) lives in the session's StudentPage.
Navigating to ``/`` reloads the records; the redirect after a post does not,
so the post's outcome stays visible.
"""

import logging
from datetime import date
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Form, Request, status
from fastapi.responses import RedirectResponse
from fastapi.templating import Jinja2Templates

from mahasiswa.client.form import FIELDS
from mahasiswa.client.gateway import StudentGateway
from mahasiswa.client.page import DISMISS_CLOSE, StudentPage
from mahasiswa.client.store import DELETE_CONFIRMATION
from mahasiswa.core.config import settings
from mahasiswa.ui.sessions import SESSION_COOKIE, PageRegistry

logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))

router = APIRouter()


def get_registry(request: Request) -> PageRegistry:
    app = request.app
    registry = getattr(app.state, "pages", None)
    if registry is None:
        registry = PageRegistry(lambda: StudentGateway.connect(app=app))
        app.state.pages = registry
    return registry


async def _session_page(request: Request, refresh: bool = False):
    return await get_registry(request).get(request.cookies.get(SESSION_COOKIE), refresh=refresh)


def _with_cookie(response, session_id: str):
    response.set_cookie(SESSION_COOKIE, session_id, httponly=True, samesite="lax")
    return response


def _back(request: Request, session_id: str):
    get_registry(request).mark_redirect(session_id)
    return _with_cookie(RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER), session_id)


def _render(request: Request, session_id: str, page: StudentPage, confirm_delete: Optional[str] = None):
    context = {
        "project_name": settings.PROJECT_NAME,
        "form": page.form,
        "search_term": page.search_term,
        "list_view": page.list_view(),
        "detail": page.detail_view(),
        "loading": page.store.loading,
        "confirm_delete": confirm_delete,
        "confirm_message": DELETE_CONFIRMATION,
        "year": date.today().year,
    }
    response = templates.TemplateResponse(request, "page.html", context)
    return _with_cookie(response, session_id)


@router.get("/")
async def show_page(request: Request, q: Optional[str] = None):
    session_id, page = await _session_page(request, refresh=True)
    if q is not None:
        page.search(q)
    return _render(request, session_id, page)


@router.post("/students/save")
async def save_student(request: Request):
    session_id, page = await _session_page(request)
    data = await request.form()

    field_errors = {}
    for field in FIELDS:
        if field not in data or page.form.is_locked(field):
            continue
        try:
            page.change(field, data[field])
        except (KeyError, ValueError) as e:
            field_errors[field] = str(e)

    if field_errors:
        page.form.errors = field_errors
    else:
        await page.submit()
    return _back(request, session_id)


@router.get("/students/{nim}/view")
async def view_student(request: Request, nim: str):
    session_id, page = await _session_page(request)
    record = page.find(nim)
    if record is not None:
        page.view(record)
    return _back(request, session_id)


@router.post("/students/view/close")
async def close_view(request: Request, origin: str = Form(DISMISS_CLOSE)):
    session_id, page = await _session_page(request)
    page.dismiss_detail(origin)
    return _back(request, session_id)


@router.get("/students/{nim}/edit")
async def edit_student(request: Request, nim: str):
    session_id, page = await _session_page(request)
    record = page.find(nim)
    if record is not None:
        page.edit(record)
    return _back(request, session_id)


@router.post("/students/edit/cancel")
async def cancel_edit(request: Request):
    session_id, page = await _session_page(request)
    page.cancel_edit()
    return _back(request, session_id)


@router.get("/students/{nim}/delete")
async def confirm_delete(request: Request, nim: str):
    session_id, page = await _session_page(request)
    if page.find(nim) is None:
        return _back(request, session_id)
    return _render(request, session_id, page, confirm_delete=nim)


@router.post("/students/{nim}/delete")
async def delete_student(request: Request, nim: str, confirmed: str = Form("false")):
    session_id, page = await _session_page(request)
    await page.delete(nim, lambda: confirmed == "true")
    return _back(request, session_id)
