"""
Contacts page controller.
Owns the contact store and the editor/form state of the "Manage Contacts"
dashboard, and drives the REST API through ContactsApi.
"""
import logging
from typing import Optional

import httpx

from ..errors import RequestError
from ..normalizer import full_name, split_name
from ..schemas import Contact, ContactForm
from .api import ContactsApi
from .store import ContactStore

logger = logging.getLogger(__name__)


def _reason(error: Exception) -> str:
    return str(error) or "Unknown error"


class ContactsPage:
    """UI state for the contacts dashboard: table, inline editor, banners."""

    def __init__(self, api: ContactsApi, store: Optional[ContactStore] = None):
        self.api = api
        self.store = store if store is not None else ContactStore()

        self.loading = False
        self.load_error: Optional[str] = None
        self.alert: Optional[str] = None

        self.editor_open = False
        self.editing: Optional[Contact] = None
        self.form = ContactForm(name="", email="", phone="")
        self.form_error: Optional[str] = None
        self.saving = False

        self._mounted = False

    @property
    def is_editing(self) -> bool:
        return bool(self.editing and self.editing.id)

    # -------------------------------------------------------------------------
    # Initial load
    # -------------------------------------------------------------------------

    def mount(self):
        """Load the contact list once per mount. Failures are not retried."""
        if self._mounted:
            return
        self._mounted = True

        self.loading = True
        self.load_error = None
        try:
            self.store.replace_all(self.api.list_contacts())
            logger.info(f"✅ Loaded {len(self.store)} contacts")
        except (RequestError, httpx.HTTPError) as e:
            logger.error(f"❌ Initial contacts load failed: {e}")
            self.store.replace_all([])
            self.load_error = f"Failed to load contacts: {_reason(e)}"
        finally:
            self.loading = False

    def remount(self):
        """Forget the previous mount so the next mount() loads again."""
        self._mounted = False
        self.mount()

    # -------------------------------------------------------------------------
    # Editor
    # -------------------------------------------------------------------------

    def open_add(self):
        self.editing = None
        self.form = ContactForm(name="", email="", phone="")
        self.form_error = None
        self.editor_open = True

    def open_edit(self, contact: Contact):
        self.editing = contact
        self.form = ContactForm(name=contact.name or "", email=contact.email, phone=contact.phone)
        self.form_error = None
        self.editor_open = True

    def cancel_editor(self):
        self.editor_open = False
        self.editing = None
        self.saving = False
        self.form_error = None

    def update_form(self, name: str = "", email: str = "", phone: str = ""):
        if self.saving:
            return
        self.form = ContactForm(name=name, email=email, phone=phone)

    def submit(self):
        """Create or update from the current form, one request at a time."""
        if self.saving:
            return
        self.form_error = None

        first, _ = split_name(self.form.name)
        if not first:
            self.form_error = "Name is required."
            return
        body = ContactForm(
            name=full_name(self.form.name),
            email=self.form.email,
            phone=self.form.phone,
        )

        self.saving = True
        try:
            if self.is_editing:
                updated = self.api.update_contact(self.editing.id, body)
                self.store.replace(updated)
            else:
                created = self.api.create_contact(body)
                self.store.prepend(created)
            self.cancel_editor()
        except (RequestError, httpx.HTTPError) as e:
            logger.error(f"❌ Saving contact failed: {e}")
            self.form_error = f"Failed to save: {_reason(e)}"
            self.saving = False

    # -------------------------------------------------------------------------
    # Delete
    # -------------------------------------------------------------------------

    def delete(self, contact_id: str, confirmed: bool):
        """Optimistically drop the row; restore the previous list on failure."""
        if not confirmed:
            return
        self.alert = None
        try:
            self.store.remove_optimistically(
                contact_id, lambda: self.api.delete_contact(contact_id)
            )
            logger.info(f"🗑️ Deleted contact {contact_id}")
        except (RequestError, httpx.HTTPError) as e:
            self.alert = f"Failed to delete: {_reason(e)}"

    def dismiss_alert(self):
        self.alert = None
