"""
Typed calls to the Contacts REST API, returning normalized contacts.
"""
from typing import List

from ..normalizer import to_client_view
from ..schemas import Contact, ContactForm
from .http_client import HttpJsonClient

CONTACTS_URL = "/api/contacts"


class ContactsApi:
    def __init__(self, http: HttpJsonClient):
        self.http = http

    def list_contacts(self) -> List[Contact]:
        data = self.http.get(CONTACTS_URL)
        items = data.get("items") if isinstance(data, dict) else None
        return [to_client_view(item) for item in items or []]

    def create_contact(self, form: ContactForm) -> Contact:
        data = self.http.post(CONTACTS_URL, form.model_dump(exclude_none=True))
        return to_client_view(data)

    def update_contact(self, contact_id: str, form: ContactForm) -> Contact:
        data = self.http.patch(f"{CONTACTS_URL}/{contact_id}", form.model_dump(exclude_none=True))
        return to_client_view(data)

    def delete_contact(self, contact_id: str) -> None:
        self.http.delete(f"{CONTACTS_URL}/{contact_id}")
