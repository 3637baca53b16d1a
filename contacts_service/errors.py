"""
Error taxonomy shared by the REST layer, the CRM adapters and the dashboard.
"""


class ValidationError(ValueError):
    """Raised when a contact form is missing its name."""

    def __init__(self, message: str = "name is required"):
        super().__init__(message)
        self.message = message


class RequestError(Exception):
    """
    Raised by the dashboard HTTP facade on any non-2xx response.

    Carries the HTTP status and the user-facing message; str(err) is the
    message itself so it can be shown verbatim.
    """

    def __init__(self, status: int, message: str):
        super().__init__(message)
        self.status = status
        self.message = message


class RevisionConflictError(Exception):
    """Raised by a CRM adapter when a mutation carries a stale revision."""

    def __init__(self, contact_id: str, revision: int, current: int | None = None):
        detail = f"stale revision {revision} for contact {contact_id}"
        if current is not None:
            detail += f" (current: {current})"
        super().__init__(detail)
        self.contact_id = contact_id
        self.revision = revision
        self.current = current
