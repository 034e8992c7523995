import httpx
import pytest

from errors import ConfigurationError
from models import Outcome, ResumeFile
from services.hubspot_client import (
    ALREADY_EXISTS,
    ALREADY_EXISTS_NO_ID,
    ASSOCIATION_FAILED,
    CONTACT_FILE_ASSOCIATION_PATH,
    CONTACT_SEARCH_PATH,
    CONTACTS_PATH,
    CREATED_WITHOUT_ID,
    FILE_UPLOAD_PATH,
    HubSpotClient,
)

PROPS = {"email": "jane@gmail.com", "firstname": "Jane"}


@pytest.fixture
def crm(hubspot):
    return HubSpotClient("pat-test", transport=hubspot.transport)


@pytest.fixture
def resume():
    return ResumeFile(filename="cv.pdf", content_type="application/pdf", content=b"%PDF-1.4 resume")


class TestConfig:
    @pytest.mark.parametrize("token", [None, ""])
    def test_missing_token(self, token):
        with pytest.raises(ConfigurationError):
            HubSpotClient(token)


class TestCreateContact:
    async def test_created(self, crm, hubspot):
        hubspot.on(CONTACTS_PATH, 201, {"id": "101"})

        result = await crm.create_contact(PROPS)

        assert result.outcome is Outcome.SUCCESS
        assert result.success
        assert result.contactId == "101"
        assert result.error is None
        assert hubspot.paths == [CONTACTS_PATH]
        assert hubspot.calls[0].headers["Authorization"] == "Bearer pat-test"
        assert hubspot.json_of(0) == {"properties": PROPS}

    async def test_created_without_id(self, crm, hubspot):
        hubspot.on(CONTACTS_PATH, 201, "not json")
        result = await crm.create_contact(PROPS)
        assert result.outcome is Outcome.SOFT_SUCCESS
        assert result.contactId is None
        assert result.error == CREATED_WITHOUT_ID

    async def test_conflict_searches_once(self, crm, hubspot):
        hubspot.on(CONTACTS_PATH, 409, {"message": "Contact already exists"})
        hubspot.on(CONTACT_SEARCH_PATH, 200, {"total": 1, "results": [{"id": "77"}, {"id": "78"}]})

        result = await crm.create_contact(PROPS)

        assert result.outcome is Outcome.SOFT_SUCCESS
        assert result.success
        assert result.contactId == "77"
        assert result.error == ALREADY_EXISTS
        assert hubspot.paths == [CONTACTS_PATH, CONTACT_SEARCH_PATH]
        search = hubspot.json_of(1)
        assert search["filterGroups"][0]["filters"] == [
            {"propertyName": "email", "operator": "EQ", "value": "jane@gmail.com"}
        ]

    async def test_conflict_search_fails(self, crm, hubspot):
        hubspot.on(CONTACTS_PATH, 409, {"message": "exists"})
        hubspot.on(CONTACT_SEARCH_PATH, 500, "oops")

        result = await crm.create_contact(PROPS)

        assert result.success
        assert result.contactId is None
        assert result.error == ALREADY_EXISTS_NO_ID
        assert hubspot.paths == [CONTACTS_PATH, CONTACT_SEARCH_PATH]

    async def test_conflict_search_transport_error(self, crm, hubspot):
        hubspot.on(CONTACTS_PATH, 409, {"message": "exists"})
        hubspot.on(CONTACT_SEARCH_PATH, exc=httpx.ConnectError("down"))

        result = await crm.create_contact(PROPS)

        assert result.outcome is Outcome.SOFT_SUCCESS
        assert result.contactId is None

    async def test_conflict_search_no_results(self, crm, hubspot):
        hubspot.on(CONTACTS_PATH, 409, {"message": "exists"})
        hubspot.on(CONTACT_SEARCH_PATH, 200, {"total": 0, "results": []})

        result = await crm.create_contact(PROPS)

        assert result.contactId is None
        assert result.error == ALREADY_EXISTS_NO_ID

    async def test_conflict_search_results_not_a_list(self, crm, hubspot):
        hubspot.on(CONTACTS_PATH, 409, {"message": "exists"})
        hubspot.on(CONTACT_SEARCH_PATH, 200, {"results": {"id": "77"}})

        result = await crm.create_contact(PROPS)

        assert result.outcome is Outcome.SOFT_SUCCESS
        assert result.contactId is None
        assert result.error == ALREADY_EXISTS_NO_ID

    async def test_other_error_is_hard_failure(self, crm, hubspot):
        hubspot.on(CONTACTS_PATH, 400, {"message": "Property values were not valid"})

        result = await crm.create_contact(PROPS)

        assert result.outcome is Outcome.FAILURE
        assert not result.success
        assert result.error.startswith("HubSpot API error: 400 - ")
        assert "Property values were not valid" in result.error
        assert hubspot.paths == [CONTACTS_PATH]

    async def test_transport_error(self, crm, hubspot):
        hubspot.on(CONTACTS_PATH, exc=httpx.ConnectError("connection refused"))
        result = await crm.create_contact(PROPS)
        assert result.outcome is Outcome.FAILURE
        assert result.error == "connection refused"


class TestUploadResume:
    async def test_upload_and_associate(self, crm, hubspot, resume):
        hubspot.on(FILE_UPLOAD_PATH, 200, {"objects": [{"id": 555, "name": "cv.pdf"}]})
        hubspot.on(CONTACT_FILE_ASSOCIATION_PATH, 200, {"status": "COMPLETE"})

        result = await crm.upload_resume("101", resume, "/resumes")

        assert result.outcome is Outcome.SUCCESS
        assert result.fileId == "555"
        assert hubspot.paths == [FILE_UPLOAD_PATH, CONTACT_FILE_ASSOCIATION_PATH]

        upload = hubspot.calls[0]
        assert upload.headers["Content-Type"].startswith("multipart/form-data")
        assert b"%PDF-1.4 resume" in upload.content
        assert b"/resumes" in upload.content
        assert b'"access": "PRIVATE"' in upload.content

        assert hubspot.json_of(1) == {
            "inputs": [{"from": {"id": "101"}, "to": {"id": "555"}, "type": "contact_to_file"}]
        }

    async def test_top_level_id(self, crm, hubspot, resume):
        hubspot.on(FILE_UPLOAD_PATH, 201, {"id": "900"})
        hubspot.on(CONTACT_FILE_ASSOCIATION_PATH, 201, {})
        result = await crm.upload_resume("101", resume, "/resumes")
        assert result.fileId == "900"

    async def test_association_failure_keeps_file(self, crm, hubspot, resume):
        hubspot.on(FILE_UPLOAD_PATH, 200, {"objects": [{"id": 555}]})
        hubspot.on(CONTACT_FILE_ASSOCIATION_PATH, 400, {"message": "bad association"})

        result = await crm.upload_resume("101", resume, "/resumes")

        assert result.outcome is Outcome.SOFT_SUCCESS
        assert result.success
        assert result.fileId == "555"
        assert result.error == ASSOCIATION_FAILED

    async def test_association_transport_error(self, crm, hubspot, resume):
        hubspot.on(FILE_UPLOAD_PATH, 200, {"objects": [{"id": 555}]})
        hubspot.on(CONTACT_FILE_ASSOCIATION_PATH, exc=httpx.ReadTimeout("slow"))

        result = await crm.upload_resume("101", resume, "/resumes")

        assert result.outcome is Outcome.SOFT_SUCCESS
        assert result.fileId == "555"

    async def test_upload_failure(self, crm, hubspot, resume):
        hubspot.on(FILE_UPLOAD_PATH, 500, "server error")

        result = await crm.upload_resume("101", resume, "/resumes")

        assert result.outcome is Outcome.FAILURE
        assert result.fileId is None
        assert result.error == "File upload failed: 500"
        assert hubspot.paths == [FILE_UPLOAD_PATH]

    async def test_upload_without_file_id(self, crm, hubspot, resume):
        hubspot.on(FILE_UPLOAD_PATH, 200, {"objects": []})

        result = await crm.upload_resume("101", resume, "/resumes")

        assert result.outcome is Outcome.FAILURE
        assert result.error == "Failed to get file ID from upload response"


    async def test_upload_objects_not_a_list(self, crm, hubspot, resume):
        hubspot.on(FILE_UPLOAD_PATH, 200, {"objects": {"id": 555}})

        result = await crm.upload_resume("101", resume, "/resumes")

        assert result.outcome is Outcome.FAILURE
        assert result.fileId is None
        assert result.error == "Failed to get file ID from upload response"
        assert hubspot.paths == [FILE_UPLOAD_PATH]
