"""
Dashboard routes: server-rendered "Manage Contacts" page.

Each browser session gets its own ContactsPage (and store), keyed by a
session cookie. Page actions block on HTTP calls to the REST API, possibly
this very service, so they run on a bounded worker limiter of their own and
cannot starve the threadpool the API handlers use.
"""
import os
import uuid
import logging
import threading
from collections import OrderedDict
from functools import partial
from pathlib import Path

import anyio
import httpx
from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from .api import ContactsApi
from .http_client import HttpJsonClient
from .page import ContactsPage

logger = logging.getLogger(__name__)

PAGE_URL = "/dashboard/contacts"
SESSION_COOKIE = "contacts_dashboard_session"
MAX_SESSIONS = int(os.getenv("DASHBOARD_MAX_SESSIONS", "500"))
WORKERS = int(os.getenv("DASHBOARD_WORKERS", "10"))

router = APIRouter(prefix=PAGE_URL, tags=["dashboard"])
templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))

_pages: "OrderedDict[str, ContactsPage]" = OrderedDict()
_pages_lock = threading.Lock()
_limiter = None


def new_contacts_page() -> ContactsPage:
    """A fresh page pointed at CONTACTS_API_URL."""
    base_url = os.getenv("CONTACTS_API_URL", "http://localhost:8000")
    logger.info(f"🖥️ New dashboard session using API at {base_url}")
    return ContactsPage(ContactsApi(HttpJsonClient(httpx.Client(base_url=base_url))))


def get_contacts_page(request: Request) -> ContactsPage:
    """
    The presentation root for the calling browser session.

    Unknown or missing session cookies start a new session; the least
    recently used session is dropped once MAX_SESSIONS is reached.
    """
    session_id = request.cookies.get(SESSION_COOKIE)
    with _pages_lock:
        page = _pages.get(session_id) if session_id else None
        if page is None:
            session_id = uuid.uuid4().hex
            page = new_contacts_page()
            _pages[session_id] = page
            while len(_pages) > MAX_SESSIONS:
                _pages.popitem(last=False)
        else:
            _pages.move_to_end(session_id)
    request.state.dashboard_session = session_id
    return page


async def _run(func, *args, **kwargs):
    global _limiter
    if _limiter is None:
        _limiter = anyio.CapacityLimiter(WORKERS)
    return await anyio.to_thread.run_sync(partial(func, *args, **kwargs), limiter=_limiter)


def _with_session(request: Request, response):
    session_id = getattr(request.state, "dashboard_session", None)
    if session_id and request.cookies.get(SESSION_COOKIE) != session_id:
        response.set_cookie(SESSION_COOKIE, session_id, httponly=True, samesite="lax")
    return response


def _back_to_page(request: Request) -> RedirectResponse:
    return _with_session(request, RedirectResponse(url=PAGE_URL, status_code=303))


@router.get("", response_class=HTMLResponse, name="dashboard_contacts_page")
async def contacts_page(request: Request, page: ContactsPage = Depends(get_contacts_page)):
    """Render the contacts table, editor and banners."""
    await _run(page.mount)
    return _with_session(request, templates.TemplateResponse(request, "contacts.html", {"page": page}))


@router.post("/new", name="dashboard_open_add")
async def open_add(request: Request, page: ContactsPage = Depends(get_contacts_page)):
    page.open_add()
    return _back_to_page(request)


@router.post("/cancel", name="dashboard_cancel_editor")
async def cancel_editor(request: Request, page: ContactsPage = Depends(get_contacts_page)):
    page.cancel_editor()
    return _back_to_page(request)


@router.post("/save", name="dashboard_save_contact")
async def save_contact(
    request: Request,
    name: str = Form(""),
    email: str = Form(""),
    phone: str = Form(""),
    page: ContactsPage = Depends(get_contacts_page),
):
    """Submit the editor form: create or update depending on the editor mode."""
    page.update_form(name=name, email=email, phone=phone)
    await _run(page.submit)
    return _back_to_page(request)


@router.post("/reload", name="dashboard_reload_contacts")
async def reload_contacts(request: Request, page: ContactsPage = Depends(get_contacts_page)):
    await _run(page.remount)
    return _back_to_page(request)


@router.post("/dismiss", name="dashboard_dismiss_alert")
async def dismiss_alert(request: Request, page: ContactsPage = Depends(get_contacts_page)):
    page.dismiss_alert()
    return _back_to_page(request)


@router.post("/{contact_id}/edit", name="dashboard_open_edit")
async def open_edit(contact_id: str, request: Request, page: ContactsPage = Depends(get_contacts_page)):
    contact = page.store.find(contact_id)
    if contact:
        page.open_edit(contact)
    return _back_to_page(request)


@router.post("/{contact_id}/delete", name="dashboard_delete_contact")
async def delete_contact(
    contact_id: str,
    request: Request,
    confirmed: bool = Form(False),
    page: ContactsPage = Depends(get_contacts_page),
):
    """Delete after the browser-side confirm(); the row goes away immediately."""
    if page.store.find(contact_id):
        await _run(page.delete, contact_id, confirmed=confirmed)
    return _back_to_page(request)
