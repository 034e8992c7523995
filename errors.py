# errors.py
from __future__ import annotations


class ConfigurationError(RuntimeError):
    """A credential or setting needed by a service is missing."""


class ContactValidationError(ValueError):
    """A contact submission was rejected before reaching HubSpot."""


class CrmError(RuntimeError):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
