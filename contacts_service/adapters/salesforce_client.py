"""
Salesforce CRM Adapter.
Uses the 'simple-salesforce' library with Username-Password OAuth flow.
Free Developer Edition: 5,000 API calls/24h.
"""
import os
import logging
from datetime import datetime
from typing import List, Optional

from simple_salesforce import Salesforce, SalesforceResourceNotFound

from ..errors import RevisionConflictError
from ..schemas import ContactInfo
from .base import CRMClient

logger = logging.getLogger(__name__)

FIELDS = "Id, FirstName, LastName, Email, Phone, SystemModstamp"


def _revision(record: dict) -> int:
    """SystemModstamp (e.g. 2024-05-01T10:00:00.000+0000) as epoch millis."""
    stamp = record.get("SystemModstamp")
    if not stamp:
        return 0
    return int(datetime.strptime(stamp, "%Y-%m-%dT%H:%M:%S.%f%z").timestamp() * 1000)


def _to_record(record: dict) -> dict:
    info = {
        "name": {
            "first": record.get("FirstName") or "",
            "last": record.get("LastName") or "",
        }
    }
    if record.get("Email"):
        info["emails"] = {"items": [{"email": record["Email"], "primary": True}]}
    if record.get("Phone"):
        info["phones"] = {"items": [{"phone": record["Phone"], "primary": True}]}

    return {
        "id": record.get("Id") or record.get("id"),
        "revision": _revision(record),
        "info": info,
    }


def _to_sobject(info: ContactInfo) -> dict:
    """
    Maps contact info to the Salesforce Contact object:
      name.first + name.last -> FirstName + LastName
      (LastName is REQUIRED, so a single-token name goes to LastName)
      primary email -> Email (only when present)
      primary phone -> Phone (only when present)
    """
    if info.name.last:
        sf_data = {"FirstName": info.name.first, "LastName": info.name.last}
    else:
        sf_data = {"FirstName": None, "LastName": info.name.first}

    if info.primary_email:
        sf_data["Email"] = info.primary_email
    if info.primary_phone:
        sf_data["Phone"] = info.primary_phone
    return sf_data


class SalesforceAdapter(CRMClient):
    """
    Salesforce CRM adapter using Username-Password authentication.

    Requires env vars:
      SALESFORCE_USERNAME
      SALESFORCE_PASSWORD
      SALESFORCE_SECURITY_TOKEN
    """

    provider = "salesforce"

    def __init__(self, sf: Optional[Salesforce] = None):
        if sf is None:
            username = os.getenv("SALESFORCE_USERNAME")
            password = os.getenv("SALESFORCE_PASSWORD")
            security_token = os.getenv("SALESFORCE_SECURITY_TOKEN")

            if not all([username, password, security_token]):
                raise ValueError(
                    "Salesforce credentials not fully set. "
                    "Need: SALESFORCE_USERNAME, SALESFORCE_PASSWORD, SALESFORCE_SECURITY_TOKEN"
                )

            try:
                sf = Salesforce(
                    username=username,
                    password=password,
                    security_token=security_token,
                )
            except Exception as e:
                logger.error(f"❌ Salesforce auth failed: {e}")
                raise
        self.sf = sf
        logger.info("✅ Salesforce adapter initialized")

    def _check_revision(self, contact_id: str, revision: int) -> dict:
        current = self.get_contact(contact_id)
        if current["revision"] != revision:
            raise RevisionConflictError(contact_id, revision, current["revision"])
        return current

    def list_contacts(self) -> List[dict]:
        results = self.sf.query(
            f"SELECT {FIELDS} FROM Contact ORDER BY CreatedDate DESC LIMIT 200"
        )
        return [_to_record(record) for record in results.get("records", [])]

    def get_contact(self, contact_id: str) -> dict:
        try:
            return _to_record(self.sf.Contact.get(contact_id))
        except SalesforceResourceNotFound:
            logger.error(f"❌ Salesforce contact not found: {contact_id}")
            raise

    def create_contact(self, info: ContactInfo) -> dict:
        try:
            result = self.sf.Contact.create(_to_sobject(info))
            external_id = result.get("id")
            logger.info(f"✅ Salesforce contact created: {external_id}")
            return self.get_contact(external_id)
        except Exception as e:
            logger.error(f"❌ Salesforce create error: {e}")
            raise

    def update_contact(self, contact_id: str, info: ContactInfo, revision: int) -> dict:
        self._check_revision(contact_id, revision)
        try:
            self.sf.Contact.update(contact_id, _to_sobject(info))
            logger.info(f"✅ Salesforce contact updated: {contact_id}")
            return self.get_contact(contact_id)
        except Exception as e:
            logger.error(f"❌ Salesforce update error: {e}")
            raise

    def archive_contact(self, contact_id: str, revision: int) -> dict:
        # Deleted records go to the Recycle Bin and can be undeleted
        current = self._check_revision(contact_id, revision)
        try:
            self.sf.Contact.delete(contact_id)
            logger.info(f"🗑️ Salesforce contact moved to Recycle Bin: {contact_id}")
            return {**current, "archived": True}
        except Exception as e:
            logger.error(f"❌ Salesforce delete error: {e}")
            raise
