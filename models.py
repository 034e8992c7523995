from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field, model_validator


class RequestBody(BaseModel):
    """Inbound body whose keys match field names regardless of case (`Message`, `FIRSTNAME`)."""

    @model_validator(mode="before")
    @classmethod
    def _match_field_names(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        names = {name.lower(): name for name in cls.model_fields}
        return {
            names.get(key.lower(), key) if isinstance(key, str) else key: value
            for key, value in data.items()
        }


class ChatMessage(RequestBody):
    role: str
    content: str = ""


class ChatRequest(RequestBody):
    message: str
    history: List[ChatMessage] = Field(default_factory=list)


class ChatResponse(BaseModel):
    message: str = Field(..., min_length=1)
    quickReplies: Optional[List[str]] = None
    isAI: bool = False


# ─────────────────────────────────────────────────────────────
# Contacts
# ─────────────────────────────────────────────────────────────
class ContactRequest(RequestBody):
    """JSON body of the contact endpoint. Required fields are checked by the intake."""
    email: Optional[str] = None
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    phone: Optional[str] = None
    company: Optional[str] = None
    jobTitle: Optional[str] = None


class ResumeFile(BaseModel):
    filename: str
    content_type: str = ""
    content: bytes = b""

    @property
    def size(self) -> int:
        return len(self.content)


class ContactSubmission(BaseModel):
    email: Optional[str] = None
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    phone: Optional[str] = None
    # None on the form path; the JSON path always sends them to HubSpot
    company: Optional[str] = None
    jobTitle: Optional[str] = None
    resume: Optional[ResumeFile] = None

    @classmethod
    def from_json(cls, req: ContactRequest) -> "ContactSubmission":
        return cls(
            email=req.email,
            firstName=req.firstName,
            lastName=req.lastName,
            phone=req.phone,
            company=req.company or "",
            jobTitle=req.jobTitle or "",
        )


class Outcome(str, Enum):
    SUCCESS = "success"
    SOFT_SUCCESS = "soft_success"
    FAILURE = "failure"


class CrmContactResult(BaseModel):
    outcome: Outcome
    contactId: Optional[str] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.outcome is not Outcome.FAILURE


class FileUploadResult(BaseModel):
    outcome: Outcome
    fileId: Optional[str] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.outcome is not Outcome.FAILURE


class ContactResponse(BaseModel):
    success: bool
    message: Optional[str] = None
    contactId: Optional[str] = None
    fileId: Optional[str] = None
    warning: Optional[str] = None
    error: Optional[str] = None
