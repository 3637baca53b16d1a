"""
Abstract Base Adapter for CRM providers.
All CRM integrations (Wix, HubSpot, Salesforce, in-memory) must implement this interface.
"""
from abc import ABC, abstractmethod
from typing import List

from ..schemas import ContactInfo


class CRMClient(ABC):
    """
    Abstract CRM Client interface.

    Every adapter returns vendor contact records shaped as
    {"id", "revision", "info": {"name", "emails"?, "phones"?}} so the REST
    layer can pass them through without caring which provider is behind it.
    """

    provider: str = "unknown"

    @abstractmethod
    def list_contacts(self) -> List[dict]:
        """Return all active (non-archived) contacts."""
        ...

    @abstractmethod
    def get_contact(self, contact_id: str) -> dict:
        """
        Fetch a single contact, including its current revision.

        Raises:
            Exception if the contact does not exist or the call fails.
        """
        ...

    @abstractmethod
    def create_contact(self, info: ContactInfo) -> dict:
        """
        Create a contact in the external CRM.

        Args:
            info: Contact info; absent email/phone blocks are not sent.

        Returns:
            The created vendor record.
        """
        ...

    @abstractmethod
    def update_contact(self, contact_id: str, info: ContactInfo, revision: int) -> dict:
        """
        Update an existing contact.

        Args:
            contact_id: The ID of the contact in the external CRM.
            info: New contact info. Absent email/phone blocks leave the
                vendor's values untouched.
            revision: Revision read from the latest get_contact().

        Raises:
            RevisionConflictError when the revision is stale.
        """
        ...

    @abstractmethod
    def archive_contact(self, contact_id: str, revision: int) -> dict:
        """
        Soft-delete a contact.

        Raises:
            RevisionConflictError when the revision is stale.
        """
        ...
