"""
Record Normalizer.
Maps between the flat dashboard form / client view and the nested vendor
contact record used by the external CRM.
"""
import logging
from typing import Any, Optional

from .errors import ValidationError
from .schemas import (
    Contact,
    ContactForm,
    ContactInfo,
    ContactName,
    EmailBlock,
    EmailItem,
    PhoneBlock,
    PhoneItem,
)

logger = logging.getLogger(__name__)


def _unwrap(record: Any) -> dict:
    """Vendor responses sometimes come as {"contact": {...}}."""
    if not isinstance(record, dict):
        return {}
    inner = record.get("contact")
    return inner if isinstance(inner, dict) else record


def _get(mapping: Any, *keys: str) -> Any:
    for key in keys:
        if not isinstance(mapping, dict):
            return None
        mapping = mapping.get(key)
    return mapping


def _first_item(block: Any, field: str) -> Optional[str]:
    items = _get(block, "items")
    if not isinstance(items, list) or not items:
        return None
    first = items[0]
    value = first.get(field) if isinstance(first, dict) else None
    return value if value else None


def to_client_view(vendor_record: Any) -> Contact:
    """
    Convert a vendor contact record into the flat client view.

    Never raises: anything missing or malformed simply stays absent.
    """
    record = _unwrap(vendor_record)
    info = record.get("info") if isinstance(record.get("info"), dict) else {}

    first = _get(info, "name", "first")
    last = _get(info, "name", "last")
    name = " ".join(str(part) for part in (first, last) if part)

    contact_id = record.get("id") or record.get("_id") or ""

    return Contact(
        id=str(contact_id),
        name=name,
        email=_first_item(info.get("emails"), "email"),
        phone=_first_item(info.get("phones"), "phone"),
    )


def split_name(name: Optional[str]) -> tuple[str, str]:
    """Split a full name into (first token, rest joined by single spaces)."""
    tokens = (name or "").split()
    if not tokens:
        return "", ""
    return tokens[0], " ".join(tokens[1:])


def full_name(name: Optional[str]) -> str:
    """Whitespace-normalized name, or "" when there is no first token."""
    first, last = split_name(name)
    return " ".join(part for part in (first, last) if part)


def to_vendor_payload(form: ContactForm) -> ContactInfo:
    """
    Build the vendor contact info from a flat form.

    Raises ValidationError when the name is empty or whitespace-only.
    Blank email/phone produce no block at all, never an empty list.
    """
    first, last = split_name(form.name)
    if not first:
        raise ValidationError("name is required")

    email = (form.email or "").strip()
    phone = (form.phone or "").strip()

    return ContactInfo(
        name=ContactName(first=first, last=last),
        emails=EmailBlock(items=[EmailItem(email=email, primary=True)]) if email else None,
        phones=PhoneBlock(items=[PhoneItem(phone=phone, primary=True)]) if phone else None,
    )


def current_revision(record: Any) -> int:
    """
    Read the concurrency revision off a vendor record.

    Falls back to 0 when the record carries none; the vendor then decides
    whether that revision is acceptable.
    """
    revision = _unwrap(record).get("revision")
    if revision is None:
        logger.warning("⚠️ Vendor record has no revision, falling back to 0")
        return 0
    try:
        return int(revision)
    except (TypeError, ValueError):
        logger.warning(f"⚠️ Unreadable revision {revision!r}, falling back to 0")
        return 0
