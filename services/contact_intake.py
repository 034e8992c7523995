# services/contact_intake.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import EmailStr, TypeAdapter, ValidationError

from errors import ContactValidationError
from models import (
    ContactResponse,
    ContactSubmission,
    CrmContactResult,
    FileUploadResult,
    Outcome,
    ResumeFile,
)
from services.hubspot_client import HubSpotClient
from settings import Settings

logger = logging.getLogger(__name__)

ALLOWED_RESUME_TYPES = (
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
)

_EMAIL = TypeAdapter(EmailStr)


def _media_type(content_type: Optional[str]) -> str:
    return (content_type or "").split(";", 1)[0].strip().lower()


def validate_submission(submission: ContactSubmission, max_bytes: int = 5 * 1024 * 1024) -> None:
    """
    Checks run in order and stop at the first problem. Nothing here talks to
    HubSpot, so a rejected submission never causes an outbound call.
    """
    if not (submission.email or "").strip() or not (submission.firstName or "").strip():
        raise ContactValidationError("Email and FirstName are required")

    try:
        _EMAIL.validate_python(submission.email.strip())
    except ValidationError:
        raise ContactValidationError("Invalid email address")

    resume = submission.resume
    if resume is None:
        return
    if resume.size > max_bytes:
        logger.warning("[CONTACT] resume too large: %d bytes (max %d)", resume.size, max_bytes)
        raise ContactValidationError("File size exceeds 5MB limit. Please upload a smaller file.")
    if _media_type(resume.content_type) not in ALLOWED_RESUME_TYPES:
        logger.warning("[CONTACT] resume type rejected: %s", resume.content_type)
        raise ContactValidationError("Only PDF, DOC, and DOCX files are allowed.")


def build_contact_properties(submission: ContactSubmission) -> Dict[str, Any]:
    props = {
        "email": submission.email.strip(),
        "firstname": submission.firstName.strip(),
        "lastname": submission.lastName or "",
        "phone": submission.phone or "",
    }
    if submission.company is not None:
        props["company"] = submission.company
    if submission.jobTitle is not None:
        props["jobtitle"] = submission.jobTitle
    props["lifecyclestage"] = "lead"
    props["hs_lead_status"] = "NEW"
    return props


class ContactIntakeHandler:
    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.crm = HubSpotClient(
            settings.HUBSPOT_API_KEY,
            base_url=settings.HUBSPOT_BASE_URL,
            timeout=settings.HUBSPOT_TIMEOUT,
            transport=transport,
        )
        self.max_resume_bytes = settings.RESUME_MAX_BYTES
        self.resume_folder = settings.RESUME_FOLDER_PATH

    async def create_contact(self, submission: ContactSubmission) -> CrmContactResult:
        return await self.crm.create_contact(build_contact_properties(submission))

    async def attach_resume(self, contact_id: str, resume: ResumeFile) -> FileUploadResult:
        return await self.crm.upload_resume(contact_id, resume, self.resume_folder)

    async def submit(self, submission: ContactSubmission) -> ContactResponse:
        """
        Validate, create the contact, then attach the resume if there is one.

        A contact that made it into HubSpot is never rolled back: resume
        problems and "already exists" come back as success with a warning.
        Raises ContactValidationError for bad input.
        """
        validate_submission(submission, self.max_resume_bytes)

        created = await self.create_contact(submission)
        if not created.success:
            return ContactResponse(success=False, error=created.error)

        response = ContactResponse(
            success=True,
            message="Contact created successfully",
            contactId=created.contactId,
            warning=created.error if created.outcome is Outcome.SOFT_SUCCESS else None,
        )

        resume = submission.resume
        if resume is None or not created.contactId:
            return response

        uploaded = await self.attach_resume(created.contactId, resume)
        if not uploaded.success:
            response.message = "Contact created but resume upload failed"
            response.warning = uploaded.error
            return response

        response.message = "Contact created and resume uploaded successfully"
        response.fileId = uploaded.fileId
        if uploaded.outcome is Outcome.SOFT_SUCCESS:
            response.warning = uploaded.error
        return response
