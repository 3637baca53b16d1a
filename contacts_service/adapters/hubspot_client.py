"""
HubSpot CRM Adapter.
Uses the HubSpot API v3 via the official 'hubspot-api-client' package.
Free tier: 250,000 API calls/day.

HubSpot has no revision token of its own, so the last-modified timestamp
(epoch millis) plays that role: update/archive re-read the contact and
refuse to write when it moved on since the caller's read.
"""
import os
import logging
from typing import List, Optional

from hubspot import HubSpot
from hubspot.crm.contacts import (
    SimplePublicObjectInput,
    SimplePublicObjectInputForCreate,
)
from hubspot.crm.contacts.exceptions import ApiException

from ..errors import RevisionConflictError
from ..schemas import ContactInfo
from .base import CRMClient

logger = logging.getLogger(__name__)

PROPERTIES = ["firstname", "lastname", "email", "phone"]


def _revision(obj) -> int:
    updated_at = getattr(obj, "updated_at", None)
    return int(updated_at.timestamp() * 1000) if updated_at else 0


def _to_record(obj) -> dict:
    """Map a HubSpot SimplePublicObject onto the vendor record shape."""
    props = obj.properties or {}
    info = {
        "name": {
            "first": props.get("firstname") or "",
            "last": props.get("lastname") or "",
        }
    }
    if props.get("email"):
        info["emails"] = {"items": [{"email": props["email"], "primary": True}]}
    if props.get("phone"):
        info["phones"] = {"items": [{"phone": props["phone"], "primary": True}]}

    return {
        "id": str(obj.id),
        "revision": _revision(obj),
        "info": info,
    }


def _to_properties(info: ContactInfo) -> dict:
    """
    Maps contact info to HubSpot Contact properties:
      name.first -> firstname
      name.last -> lastname
      primary email -> email (only when present)
      primary phone -> phone (only when present)
    """
    properties = {
        "firstname": info.name.first,
        "lastname": info.name.last,
    }
    if info.primary_email:
        properties["email"] = info.primary_email
    if info.primary_phone:
        properties["phone"] = info.primary_phone
    return properties


class HubSpotAdapter(CRMClient):
    """
    HubSpot CRM adapter using Private App access token.

    Requires env var: HUBSPOT_ACCESS_TOKEN
    """

    provider = "hubspot"

    def __init__(self, client: Optional[HubSpot] = None):
        if client is None:
            token = os.getenv("HUBSPOT_ACCESS_TOKEN")
            if not token:
                raise ValueError("HUBSPOT_ACCESS_TOKEN environment variable is not set")
            client = HubSpot(access_token=token)
        self.client = client
        logger.info("✅ HubSpot adapter initialized")

    def _check_revision(self, contact_id: str, revision: int) -> dict:
        current = self.get_contact(contact_id)
        if current["revision"] != revision:
            raise RevisionConflictError(contact_id, revision, current["revision"])
        return current

    def list_contacts(self) -> List[dict]:
        try:
            page = self.client.crm.contacts.basic_api.get_page(
                limit=100, properties=PROPERTIES, archived=False
            )
            return [_to_record(obj) for obj in page.results]
        except ApiException as e:
            logger.error(f"❌ HubSpot list error: {e}")
            raise

    def get_contact(self, contact_id: str) -> dict:
        try:
            obj = self.client.crm.contacts.basic_api.get_by_id(
                contact_id=contact_id, properties=PROPERTIES
            )
            return _to_record(obj)
        except ApiException as e:
            logger.error(f"❌ HubSpot get error: {e}")
            raise

    def create_contact(self, info: ContactInfo) -> dict:
        try:
            contact_input = SimplePublicObjectInputForCreate(properties=_to_properties(info))
            response = self.client.crm.contacts.basic_api.create(
                simple_public_object_input_for_create=contact_input
            )
            logger.info(f"✅ HubSpot contact created: {response.id}")
            return _to_record(response)
        except ApiException as e:
            # Duplicate email comes back as 409 Conflict
            if e.status == 409:
                logger.warning(f"⚠️ HubSpot contact already exists for {info.primary_email}")
            logger.error(f"❌ HubSpot API error: {e}")
            raise

    def update_contact(self, contact_id: str, info: ContactInfo, revision: int) -> dict:
        self._check_revision(contact_id, revision)
        try:
            update_input = SimplePublicObjectInput(properties=_to_properties(info))
            response = self.client.crm.contacts.basic_api.update(
                contact_id=contact_id,
                simple_public_object_input=update_input,
            )
            logger.info(f"✅ HubSpot contact updated: {contact_id}")
            return _to_record(response)
        except ApiException as e:
            logger.error(f"❌ HubSpot update error: {e}")
            raise

    def archive_contact(self, contact_id: str, revision: int) -> dict:
        current = self._check_revision(contact_id, revision)
        try:
            self.client.crm.contacts.basic_api.archive(contact_id=contact_id)
            logger.info(f"🗑️ HubSpot contact archived: {contact_id}")
            return {**current, "archived": True}
        except ApiException as e:
            logger.error(f"❌ HubSpot archive error: {e}")
            raise
