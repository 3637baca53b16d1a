"""
Pydantic schemas for the Contacts API.

Two shapes live here: the flat client view / form used by the dashboard, and
the nested vendor contact info sent to the external CRM.
"""
from typing import List, Optional

from pydantic import BaseModel, Field


# =============================================================================
# Client view
# =============================================================================

class ContactForm(BaseModel):
    """Body of POST /api/contacts and PATCH /api/contacts/{id}."""

    name: Optional[str] = Field(default=None)
    email: Optional[str] = Field(default=None)
    phone: Optional[str] = Field(default=None)

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Jane Doe",
                "email": "jane@example.com",
                "phone": "+972 54 123 4567",
            }
        }


class Contact(BaseModel):
    """Flat contact as shown in the dashboard table."""

    id: str
    name: str = ""
    email: Optional[str] = None
    phone: Optional[str] = None


# =============================================================================
# Vendor contact info
# =============================================================================

class ContactName(BaseModel):
    first: str
    last: str = ""


class EmailItem(BaseModel):
    email: str
    primary: bool = True
    tag: Optional[str] = None


class EmailBlock(BaseModel):
    items: List[EmailItem]


class PhoneItem(BaseModel):
    phone: str
    primary: bool = True
    tag: Optional[str] = None


class PhoneBlock(BaseModel):
    items: List[PhoneItem]


class ContactInfo(BaseModel):
    """
    Contact info as accepted by the CRM on create/update.

    `emails` and `phones` are optional blocks: when None they are left out of
    the payload entirely, so an update does not clear what the vendor holds.
    """

    name: ContactName
    emails: Optional[EmailBlock] = None
    phones: Optional[PhoneBlock] = None

    def to_payload(self) -> dict:
        return self.model_dump(exclude_none=True)

    @property
    def primary_email(self) -> Optional[str]:
        return self.emails.items[0].email if self.emails and self.emails.items else None

    @property
    def primary_phone(self) -> Optional[str]:
        return self.phones.items[0].phone if self.phones and self.phones.items else None


# =============================================================================
# Responses
# =============================================================================

class ContactListResponse(BaseModel):
    """Response of GET /api/contacts: vendor records, untouched."""

    items: List[dict]


class ErrorResponse(BaseModel):
    error: str
