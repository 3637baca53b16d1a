"""
Tests for the ContactsPage controller: initial load, editor, optimistic delete.
"""
from unittest.mock import MagicMock

import httpx
import pytest

from contacts_service.dashboard.api import ContactsApi
from contacts_service.dashboard.http_client import HttpJsonClient
from contacts_service.dashboard.page import ContactsPage
from contacts_service.errors import RequestError
from contacts_service.normalizer import to_client_view
from contacts_service.schemas import Contact, ContactForm

from tests.helpers import vendor_record


@pytest.fixture
def api():
    return MagicMock(spec=ContactsApi)


@pytest.fixture
def page(api):
    api.list_contacts.return_value = [
        Contact(id="c1", name="Jane Doe", email="jane@example.com"),
        Contact(id="c2", name="John Smith"),
    ]
    page = ContactsPage(api)
    page.mount()
    return page


class TestInitialLoad:
    def test_list_is_normalized_in_order(self):
        """{items: [r1, r2]} becomes exactly [normalize(r1), normalize(r2)]."""
        r1 = vendor_record("c1", "Jane", "Doe", email="jane@example.com")
        r2 = vendor_record("c2", "John", "", phone="+1234567890")
        http = MagicMock(spec=HttpJsonClient)
        http.get.return_value = {"items": [r1, r2]}

        page = ContactsPage(ContactsApi(http))
        page.mount()

        http.get.assert_called_once_with("/api/contacts")
        assert page.store.rows == [to_client_view(r1), to_client_view(r2)]
        assert page.load_error is None
        assert page.loading is False

    def test_one_load_per_mount(self, page, api):
        page.mount()
        page.mount()
        assert api.list_contacts.call_count == 1

    def test_remount_loads_again(self, page, api):
        page.remount()
        assert api.list_contacts.call_count == 2

    def test_load_failure_shows_banner_and_is_not_retried(self, api):
        api.list_contacts.side_effect = RequestError(500, "Failed listing contacts")
        page = ContactsPage(api)

        page.mount()
        page.mount()

        assert page.store.rows == []
        assert page.load_error == "Failed to load contacts: Failed listing contacts"
        assert api.list_contacts.call_count == 1

    def test_transport_failure_on_load(self, api):
        api.list_contacts.side_effect = httpx.ConnectError("connection refused")
        page = ContactsPage(api)

        page.mount()

        assert page.load_error == "Failed to load contacts: connection refused"


class TestEditor:
    def test_open_add_resets_form(self, page):
        page.form_error = "old"
        page.open_add()
        assert page.editor_open is True
        assert page.is_editing is False
        assert page.form == ContactForm(name="", email="", phone="")
        assert page.form_error is None

    def test_open_edit_prefills_form(self, page):
        page.open_edit(page.store.find("c1"))
        assert page.is_editing is True
        assert page.form.name == "Jane Doe"
        assert page.form.email == "jane@example.com"

    def test_name_is_required(self, page, api):
        page.open_add()
        page.update_form(name="   ", email="x@example.com")

        page.submit()

        assert page.form_error == "Name is required."
        assert page.editor_open is True
        api.create_contact.assert_not_called()

    def test_create_prepends_result(self, page, api):
        api.create_contact.return_value = Contact(id="c9", name="Ada Lovelace")
        page.open_add()
        page.update_form(name="  Ada   Lovelace ", email="ada@example.com", phone="")

        page.submit()

        api.create_contact.assert_called_once_with(
            ContactForm(name="Ada Lovelace", email="ada@example.com", phone="")
        )
        assert [r.id for r in page.store.rows] == ["c9", "c1", "c2"]
        assert page.editor_open is False
        assert page.saving is False

    def test_update_replaces_in_place(self, page, api):
        api.update_contact.return_value = Contact(id="c1", name="Jane Smith")
        page.open_edit(page.store.find("c1"))
        page.update_form(name="Jane Smith")

        page.submit()

        api.update_contact.assert_called_once()
        assert api.update_contact.call_args.args[0] == "c1"
        assert [r.name for r in page.store.rows] == ["Jane Smith", "John Smith"]
        assert page.editor_open is False

    def test_save_failure_keeps_editor_open(self, page, api):
        api.create_contact.side_effect = RequestError(500, "Failed creating contact")
        page.open_add()
        page.update_form(name="Jane")

        page.submit()

        assert page.form_error == "Failed to save: Failed creating contact"
        assert page.saving is False
        assert page.editor_open is True
        assert len(page.store) == 2

    def test_submit_ignored_while_saving(self, page, api):
        page.open_add()
        page.update_form(name="Jane")
        page.saving = True

        page.submit()

        api.create_contact.assert_not_called()

    def test_cancel_closes_editor(self, page):
        page.open_edit(page.store.find("c2"))
        page.cancel_editor()
        assert page.editor_open is False
        assert page.editing is None


class TestDelete:
    def test_requires_confirmation(self, page, api):
        page.delete("c1", confirmed=False)
        api.delete_contact.assert_not_called()
        assert len(page.store) == 2

    def test_delete_removes_row(self, page, api):
        page.delete("c1", confirmed=True)
        api.delete_contact.assert_called_once_with("c1")
        assert [r.id for r in page.store.rows] == ["c2"]
        assert page.alert is None

    def test_failed_delete_restores_list(self, page, api):
        before = page.store.rows

        def fail(contact_id):
            assert page.store.find(contact_id) is None
            raise RequestError(500, "Failed deleting contact")

        api.delete_contact.side_effect = fail

        page.delete("c1", confirmed=True)

        assert page.store.rows == before
        assert page.alert == "Failed to delete: Failed deleting contact"

        page.dismiss_alert()
        assert page.alert is None
