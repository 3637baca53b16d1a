"""
In-memory CRM Adapter.
Stands in for the external CRM during local development and tests.
Records and revisions behave like the hosted providers; nothing survives a restart.
"""
import copy
import logging
import uuid
from typing import Dict, List

from ..errors import RevisionConflictError
from ..schemas import ContactInfo
from .base import CRMClient

logger = logging.getLogger(__name__)


class InMemoryCRMClient(CRMClient):
    """Dict-backed CRM with exact revision checks on update and archive."""

    provider = "memory"

    def __init__(self):
        self._records: Dict[str, dict] = {}
        self._order: List[str] = []
        logger.info("✅ In-memory CRM adapter initialized")

    def _require(self, contact_id: str) -> dict:
        record = self._records.get(contact_id)
        if record is None:
            raise KeyError(f"Contact {contact_id} not found")
        return record

    def _check_revision(self, record: dict, revision: int):
        if record["revision"] != revision:
            raise RevisionConflictError(record["id"], revision, record["revision"])

    def list_contacts(self) -> List[dict]:
        return [
            copy.deepcopy(self._records[cid])
            for cid in self._order
            if not self._records[cid].get("archived")
        ]

    def get_contact(self, contact_id: str) -> dict:
        return copy.deepcopy(self._require(contact_id))

    def create_contact(self, info: ContactInfo) -> dict:
        contact_id = str(uuid.uuid4())
        record = {
            "id": contact_id,
            "revision": 1,
            "info": info.to_payload(),
        }
        self._records[contact_id] = record
        self._order.insert(0, contact_id)
        logger.info(f"✅ In-memory contact created: {contact_id}")
        return copy.deepcopy(record)

    def update_contact(self, contact_id: str, info: ContactInfo, revision: int) -> dict:
        record = self._require(contact_id)
        self._check_revision(record, revision)

        payload = info.to_payload()
        merged = dict(record["info"])
        merged["name"] = payload["name"]
        for block in ("emails", "phones"):
            if block in payload:
                merged[block] = payload[block]

        record["info"] = merged
        record["revision"] += 1
        logger.info(f"✅ In-memory contact updated: {contact_id} (revision {record['revision']})")
        return copy.deepcopy(record)

    def archive_contact(self, contact_id: str, revision: int) -> dict:
        record = self._require(contact_id)
        self._check_revision(record, revision)
        record["archived"] = True
        record["revision"] += 1
        logger.info(f"🗑️ In-memory contact archived: {contact_id}")
        return copy.deepcopy(record)
