"""
Contacts Service - Contact administration API backed by an external CRM.
Exposes list/create/update/delete endpoints that forward to the configured
CRM provider (Wix / HubSpot / Salesforce / in-memory) via the Adapter Pattern,
plus the server-rendered contacts dashboard.
"""
import os
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.concurrency import run_in_threadpool
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_fastapi_instrumentator import Instrumentator

from .adapters.base import CRMClient
from .dashboard.routes import router as dashboard_router
from .errors import ValidationError
from .normalizer import current_revision, to_vendor_payload
from .schemas import ContactForm, ContactListResponse, ErrorResponse

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

VERSION = "1.0.0"


# =============================================================================
# CRM Adapter Factory
# =============================================================================

_crm_client = None  # Singleton


def get_crm_client() -> CRMClient | None:
    """
    Factory function that creates the appropriate CRM adapter
    based on the CRM_PROVIDER environment variable.
    Returns None if provider is 'none' or the adapter could not be initialized.
    """
    global _crm_client
    if _crm_client is not None:
        return _crm_client

    provider = os.getenv("CRM_PROVIDER", "wix").lower()

    try:
        if provider == "wix":
            from .adapters.wix_client import WixContactsAdapter
            _crm_client = WixContactsAdapter()
        elif provider == "hubspot":
            from .adapters.hubspot_client import HubSpotAdapter
            _crm_client = HubSpotAdapter()
        elif provider == "salesforce":
            from .adapters.salesforce_client import SalesforceAdapter
            _crm_client = SalesforceAdapter()
        elif provider == "memory":
            from .adapters.memory_client import InMemoryCRMClient
            _crm_client = InMemoryCRMClient()
        else:
            logger.info("ℹ️ CRM_PROVIDER set to 'none' or unknown, contact endpoints will fail")
            return None
    except Exception as e:
        logger.error(f"❌ Failed to init {provider} adapter: {e}")
        return None

    return _crm_client


def _require_crm() -> CRMClient:
    crm = get_crm_client()
    if crm is None:
        raise RuntimeError("No CRM provider configured. Set CRM_PROVIDER env var.")
    return crm


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


# =============================================================================
# FastAPI App
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log CRM adapter status on startup."""
    provider = os.getenv("CRM_PROVIDER", "wix")
    logger.info(f"🏢 CRM Provider configured: {provider}")
    crm = get_crm_client()
    if crm:
        logger.info(f"✅ CRM adapter ready: {type(crm).__name__}")
    else:
        logger.info("ℹ️ No external CRM adapter, contact endpoints will return 500")
    yield


app = FastAPI(
    title="Contacts Service",
    description="Contact administration (list/create/edit/delete) on top of an external CRM",
    version=VERSION,
    lifespan=lifespan,
)

# Prometheus metrics
Instrumentator().instrument(app).expose(app)

app.include_router(dashboard_router)


@app.exception_handler(RequestValidationError)
async def invalid_body_handler(request, exc):
    """Keep the {error} response shape for malformed bodies too."""
    logger.warning(f"⚠️ Invalid request body on {request.url.path}: {exc.errors()}")
    return _error(400, "invalid request body")


# =============================================================================
# Health
# =============================================================================

@app.get("/health")
async def health_check():
    """Health check with CRM adapter status."""
    provider = os.getenv("CRM_PROVIDER", "wix")
    crm = get_crm_client()
    return {
        "status": "ok",
        "service": "contacts",
        "version": VERSION,
        "crm_provider": provider,
        "crm_connected": crm is not None,
    }


# =============================================================================
# Contact Endpoints
# =============================================================================

ERRORS = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}


@app.get("/api/contacts", response_model=ContactListResponse, responses=ERRORS)
async def list_contacts():
    """List contacts straight from the CRM."""
    try:
        items = await run_in_threadpool(_require_crm().list_contacts)
        return {"items": items or []}
    except Exception as e:
        logger.error(f"❌ LIST error: {e}")
        return _error(500, "Failed listing contacts")


@app.post("/api/contacts", responses=ERRORS)
async def create_contact(form: ContactForm):
    """Create a contact; blank email/phone are not sent to the CRM."""
    try:
        info = to_vendor_payload(form)
        created = await run_in_threadpool(_require_crm().create_contact, info)
        logger.info(f"✅ Created contact: {info.name.first} {info.name.last}".rstrip())
        return created
    except ValidationError as e:
        return _error(400, e.message)
    except Exception as e:
        logger.error(f"❌ CREATE error: {e}")
        return _error(500, "Failed creating contact")


@app.patch("/api/contacts/{contact_id}", responses=ERRORS)
async def update_contact(contact_id: str, form: ContactForm):
    """
    Update a contact.

    Reads the contact first to get its latest revision, then writes with it.
    A stale revision is not retried: the CRM's rejection becomes a 500.
    """
    try:
        crm = _require_crm()
        revision = current_revision(await run_in_threadpool(crm.get_contact, contact_id))
        info = to_vendor_payload(form)
        updated = await run_in_threadpool(crm.update_contact, contact_id, info, revision)
        logger.info(f"✅ Updated contact: {contact_id} (revision {revision})")
        return updated
    except ValidationError as e:
        return _error(400, e.message)
    except Exception as e:
        logger.error(f"❌ UPDATE error for {contact_id}: {e}")
        return _error(500, "Failed updating contact")


@app.delete("/api/contacts/{contact_id}", responses=ERRORS)
async def delete_contact(contact_id: str):
    """Archive (soft delete) a contact at its latest revision."""
    try:
        crm = _require_crm()
        revision = current_revision(await run_in_threadpool(crm.get_contact, contact_id))
        archived = await run_in_threadpool(crm.archive_contact, contact_id, revision)
        logger.info(f"🗑️ Archived contact: {contact_id} (revision {revision})")
        return archived
    except Exception as e:
        logger.error(f"❌ DELETE error for {contact_id}: {e}")
        return _error(500, "Failed deleting contact")


# =============================================================================
# Root Info
# =============================================================================

@app.get("/")
async def root():
    """Root endpoint with service info."""
    return {
        "service": "Contacts Service",
        "version": VERSION,
        "endpoints": {
            "/health": "Health check (includes CRM status)",
            "/api/contacts": "GET - List contacts, POST - Create contact",
            "/api/contacts/{id}": "PATCH - Update contact, DELETE - Archive contact",
            "/dashboard/contacts": "Contacts dashboard (HTML)",
            "/metrics": "Prometheus metrics",
        },
    }
