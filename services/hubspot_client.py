# services/hubspot_client.py
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import httpx

from errors import ConfigurationError, CrmError
from models import CrmContactResult, FileUploadResult, Outcome, ResumeFile

logger = logging.getLogger(__name__)

HUBSPOT_BASE = "https://api.hubapi.com"

CONTACTS_PATH = "/crm/v3/objects/contacts"
CONTACT_SEARCH_PATH = "/crm/v3/objects/contacts/search"
FILE_UPLOAD_PATH = "/filemanager/api/v3/files/upload"
CONTACT_FILE_ASSOCIATION_PATH = "/crm/v3/associations/contacts/files/batch/create"

# Private file, never overwrite or dedupe an existing resume
FILE_UPLOAD_OPTIONS = {
    "access": "PRIVATE",
    "overwrite": False,
    "duplicateValidationStrategy": "NONE",
    "duplicateValidationScope": "EXACT_FOLDER",
}

ALREADY_EXISTS = "Contact already exists"
ALREADY_EXISTS_NO_ID = "Contact already exists but could not retrieve ID"
CREATED_WITHOUT_ID = "Contact created but HubSpot did not return an ID"
ASSOCIATION_FAILED = "File uploaded but could not be associated with contact"


def _json(response: httpx.Response) -> Dict[str, Any]:
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def _describe(exc: Exception) -> str:
    return str(exc) or exc.__class__.__name__


class HubSpotClient:
    """
    Thin async wrapper around the HubSpot endpoints the website needs.

    Each call opens its own httpx.AsyncClient with bearer auth. HTTP outcomes
    are translated into CrmContactResult / FileUploadResult so callers never
    see raw httpx errors from create_contact or upload_resume.
    """

    def __init__(self,
                 token: Optional[str],
                 base_url: str = HUBSPOT_BASE,
                 timeout: float = 20.0,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        if not token:
            raise ConfigurationError("HUBSPOT_API_KEY not set")
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Authorization": f"Bearer {self.token}"},
            timeout=self.timeout,
            transport=self.transport,
        )

    # ─────────────────────────────────────────────────────────
    # Contacts
    # ─────────────────────────────────────────────────────────
    async def create_contact(self, properties: Dict[str, Any]) -> CrmContactResult:
        """
        POST /crm/v3/objects/contacts
        409 means the email is already known: look the contact up instead and
        report a soft success.
        """
        try:
            async with self._client() as client:
                r = await client.post(CONTACTS_PATH, json={"properties": properties})
        except httpx.HTTPError as e:
            logger.error("[HUBSPOT] create contact request failed: %s", _describe(e))
            return CrmContactResult(outcome=Outcome.FAILURE, error=_describe(e))

        if r.is_success:
            contact_id = _json(r).get("id")
            if not contact_id:
                logger.warning("[HUBSPOT] create contact returned %s without an id", r.status_code)
                return CrmContactResult(outcome=Outcome.SOFT_SUCCESS, error=CREATED_WITHOUT_ID)
            logger.info("[HUBSPOT] contact created -> %s", contact_id)
            return CrmContactResult(outcome=Outcome.SUCCESS, contactId=str(contact_id))

        if r.status_code == httpx.codes.CONFLICT:
            logger.info("[HUBSPOT] contact already exists, searching by email")
            email = properties.get("email")
            existing_id = await self.search_contact_id(email) if email else None
            if existing_id:
                return CrmContactResult(outcome=Outcome.SOFT_SUCCESS, contactId=existing_id, error=ALREADY_EXISTS)
            return CrmContactResult(outcome=Outcome.SOFT_SUCCESS, error=ALREADY_EXISTS_NO_ID)

        logger.error("[HUBSPOT] create contact failed: %s %s", r.status_code, r.text)
        return CrmContactResult(
            outcome=Outcome.FAILURE,
            error=f"HubSpot API error: {r.status_code} - {r.text}",
        )

    async def search_contact_id(self, email: str) -> Optional[str]:
        """Returns the id of the first contact with this email, or None."""
        payload = {
            "filterGroups": [
                {"filters": [{"propertyName": "email", "operator": "EQ", "value": email}]}
            ]
        }
        try:
            async with self._client() as client:
                r = await client.post(CONTACT_SEARCH_PATH, json=payload)
        except httpx.HTTPError as e:
            logger.warning("[HUBSPOT] contact search request failed: %s", _describe(e))
            return None

        if not r.is_success:
            logger.warning("[HUBSPOT] contact search failed: %s %s", r.status_code, r.text)
            return None

        results = _json(r).get("results")
        if not isinstance(results, list):
            logger.warning("[HUBSPOT] contact search returned no results list")
            return None
        logger.info("[HUBSPOT] contact search -> %d result(s)", len(results))
        if not results or not isinstance(results[0], dict):
            return None
        contact_id = results[0].get("id")
        return str(contact_id) if contact_id else None

    # ─────────────────────────────────────────────────────────
    # Files
    # ─────────────────────────────────────────────────────────
    async def upload_file(self, resume: ResumeFile, folder_path: str) -> str:
        files = {
            "file": (resume.filename, resume.content, resume.content_type or "application/octet-stream"),
        }
        data = {"folderPath": folder_path, "options": json.dumps(FILE_UPLOAD_OPTIONS)}

        async with self._client() as client:
            r = await client.post(FILE_UPLOAD_PATH, files=files, data=data)

        logger.info("[HUBSPOT] file upload -> %s", r.status_code)
        if not r.is_success:
            logger.error("[HUBSPOT] file upload failed: %s", r.text)
            raise CrmError(f"File upload failed: {r.status_code}", r.status_code)

        body = _json(r)
        objects = body.get("objects")
        if isinstance(objects, list) and objects and isinstance(objects[0], dict):
            file_id = objects[0].get("id")
        else:
            file_id = body.get("id")
        if not file_id:
            raise CrmError("Failed to get file ID from upload response", r.status_code)
        return str(file_id)

    async def associate_file(self, contact_id: str, file_id: str) -> None:
        payload = {
            "inputs": [
                {"from": {"id": contact_id}, "to": {"id": file_id}, "type": "contact_to_file"}
            ]
        }
        async with self._client() as client:
            r = await client.post(CONTACT_FILE_ASSOCIATION_PATH, json=payload)

        if not r.is_success:
            logger.warning("[HUBSPOT] file association failed: %s %s", r.status_code, r.text)
            raise CrmError(f"File association failed: {r.status_code}", r.status_code)

    async def upload_resume(self, contact_id: str, resume: ResumeFile, folder_path: str) -> FileUploadResult:
        try:
            file_id = await self.upload_file(resume, folder_path)
        except (CrmError, httpx.HTTPError) as e:
            logger.error("[HUBSPOT] resume upload error for contact %s: %s", contact_id, _describe(e))
            return FileUploadResult(outcome=Outcome.FAILURE, error=_describe(e))

        try:
            await self.associate_file(contact_id, file_id)
        except (CrmError, httpx.HTTPError) as e:
            logger.warning("[HUBSPOT] file %s kept but not linked to %s: %s", file_id, contact_id, _describe(e))
            return FileUploadResult(outcome=Outcome.SOFT_SUCCESS, fileId=file_id, error=ASSOCIATION_FAILED)

        logger.info("[HUBSPOT] resume %s associated with contact %s", file_id, contact_id)
        return FileUploadResult(outcome=Outcome.SUCCESS, fileId=file_id)
