"""
Client-side Contact Store.
Holds the rows shown by the dashboard and supports optimistic delete with
snapshot rollback.
"""
import logging
from typing import Callable, Iterable, List, Tuple

from ..schemas import Contact

logger = logging.getLogger(__name__)

Snapshot = Tuple[Contact, ...]


class ContactStore:
    """
    Ordered list of normalized contacts, unique by id.

    Owned by the page controller; never shared globally.
    """

    def __init__(self, rows: Iterable[Contact] = ()):
        self._rows: List[Contact] = list(rows)

    @property
    def rows(self) -> List[Contact]:
        return list(self._rows)

    def __len__(self) -> int:
        return len(self._rows)

    def find(self, contact_id: str) -> Contact | None:
        return next((r for r in self._rows if r.id == contact_id), None)

    def replace_all(self, rows: Iterable[Contact]):
        self._rows = list(rows)

    def prepend(self, contact: Contact):
        self._rows = [contact] + self._rows

    def replace(self, contact: Contact):
        """Swap in the entry with the same id, keeping list order."""
        self._rows = [contact if r.id == contact.id else r for r in self._rows]

    def remove(self, contact_id: str):
        self._rows = [r for r in self._rows if r.id != contact_id]

    def snapshot(self) -> Snapshot:
        return tuple(self._rows)

    def restore(self, snapshot: Snapshot):
        """Full replace with a previous snapshot, never a merge."""
        self._rows = list(snapshot)

    def remove_optimistically(self, contact_id: str, commit: Callable[[], None]):
        """
        Remove a row right away, then run `commit` (the server delete).

        If `commit` raises, the list is restored to exactly what it was before
        the removal and the error is re-raised. Anything else that changed the
        store while `commit` was running is rolled back too.
        """
        snapshot = self.snapshot()
        self.remove(contact_id)
        try:
            commit()
        except Exception:
            logger.warning(f"⚠️ Delete of {contact_id} failed, restoring {len(snapshot)} rows")
            self.restore(snapshot)
            raise
