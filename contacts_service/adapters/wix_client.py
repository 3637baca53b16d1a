"""
Wix CRM Adapter.
Talks to the Wix Contacts v4 REST API over httpx, authenticated with an API key.
Wix enforces revisions itself: a stale revision comes back as 409/412.
"""
import os
import logging
from typing import List, Optional

import httpx

from ..errors import RevisionConflictError
from ..schemas import ContactInfo
from .base import CRMClient

logger = logging.getLogger(__name__)

CONTACTS_PATH = "/contacts/v4/contacts"
CONFLICT_STATUSES = {409, 412}


class WixContactsAdapter(CRMClient):
    """
    Wix Contacts adapter using an API key.

    Requires env vars:
      WIX_API_KEY
      WIX_SITE_ID (required by Wix for API-key calls scoped to a site)
    """

    provider = "wix"

    def __init__(self, client: Optional[httpx.Client] = None):
        if client is None:
            api_key = os.getenv("WIX_API_KEY")
            if not api_key:
                raise ValueError("WIX_API_KEY environment variable is not set")

            headers = {"Authorization": api_key}
            site_id = os.getenv("WIX_SITE_ID")
            if site_id:
                headers["wix-site-id"] = site_id

            client = httpx.Client(
                base_url=os.getenv("WIX_API_URL", "https://www.wixapis.com"),
                headers=headers,
            )
        self.client = client
        logger.info("✅ Wix adapter initialized")

    @staticmethod
    def _contact(body: dict) -> dict:
        inner = body.get("contact") if isinstance(body, dict) else None
        return inner if isinstance(inner, dict) else body

    def _send(self, method: str, path: str, contact_id: str = "", revision: int = 0, **kwargs) -> dict:
        response = self.client.request(method, path, **kwargs)
        if response.status_code in CONFLICT_STATUSES:
            logger.warning(f"⚠️ Wix rejected revision {revision} for {contact_id}: {response.text}")
            raise RevisionConflictError(contact_id, revision)
        response.raise_for_status()
        return response.json() if response.content else {}

    def list_contacts(self) -> List[dict]:
        body = self._send("GET", CONTACTS_PATH)
        return body.get("contacts") or []

    def get_contact(self, contact_id: str) -> dict:
        return self._contact(self._send("GET", f"{CONTACTS_PATH}/{contact_id}"))

    def create_contact(self, info: ContactInfo) -> dict:
        body = self._send("POST", CONTACTS_PATH, json={"info": info.to_payload()})
        contact = self._contact(body)
        logger.info(f"✅ Wix contact created: {contact.get('id')}")
        return contact

    def update_contact(self, contact_id: str, info: ContactInfo, revision: int) -> dict:
        body = self._send(
            "PATCH",
            f"{CONTACTS_PATH}/{contact_id}",
            contact_id=contact_id,
            revision=revision,
            json={"revision": revision, "info": info.to_payload()},
        )
        logger.info(f"✅ Wix contact updated: {contact_id}")
        return self._contact(body)

    def archive_contact(self, contact_id: str, revision: int) -> dict:
        body = self._send(
            "POST",
            f"{CONTACTS_PATH}/{contact_id}/archive",
            contact_id=contact_id,
            revision=revision,
            json={"revision": revision},
        )
        logger.info(f"🗑️ Wix contact archived: {contact_id}")
        return self._contact(body)
