import pytest
import sys
from pathlib import Path
from unittest.mock import Mock, AsyncMock, patch

# Add the src directory to the Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from aiogoogle.excs import HTTPError

FOLDER_MIME = "application/vnd.google-apps.folder"
DOC_MIME = "application/vnd.google-apps.document"


def make_file(file_id, name=None, mime_type="text/plain", size="11"):
    """Builds a Drive file resource as returned by files.list."""
    resource = {"id": file_id, "name": name or f"{file_id}.txt", "mimeType": mime_type}
    if size is not None:
        resource["size"] = size
    return resource


def make_folder(folder_id, name=None):
    return {"id": folder_id, "name": name or folder_id, "mimeType": FOLDER_MIME}


def make_http_error(status_code, reason=None):
    """Builds an aiogoogle HTTPError carrying a response with the given status."""
    mock_res = Mock()
    mock_res.status_code = status_code
    mock_res.content = {"error": {"errors": [{"reason": reason}]}} if reason else None
    return HTTPError(f"HTTP {status_code}", res=mock_res)


class FakeDrive:
    """
    In-memory stand-in for the Drive v3 endpoints the fetcher uses.

    Folders are stored as lists of pages; page n of folder X is requested with
    the token "X-p<n>". Requests built by the mocked service are tuples of
    (method, kwargs) and are answered by handle(), which is installed as the
    side effect of aiogoogle.send.
    """

    def __init__(self):
        self.folders = {}
        self.contents = {}
        self.failures = {}
        self.list_failures = {}
        self.requests = []

    def add_folder(self, folder_id, *pages):
        self.folders[folder_id] = [list(page) for page in pages] or [[]]

    def add_content(self, file_id, content):
        self.contents[file_id] = content

    def fail(self, file_id, error):
        self.failures[file_id] = error

    def fail_listing(self, folder_id, error):
        self.list_failures[folder_id] = error

    def build_service(self):
        service = Mock()
        service.files.list.side_effect = lambda **kwargs: ("list", kwargs)
        service.files.get.side_effect = lambda **kwargs: ("get", kwargs)
        service.files.export.side_effect = lambda **kwargs: ("export", kwargs)
        return service

    def downloaded_ids(self):
        return [kwargs["fileId"] for method, kwargs in self.requests if method in ("get", "export")]

    def list_calls(self):
        return [kwargs for method, kwargs in self.requests if method == "list"]

    async def handle(self, request):
        method, kwargs = request
        self.requests.append(request)

        if method == "list":
            folder_id = kwargs["q"].split("'")[1]
            if folder_id in self.list_failures:
                raise self.list_failures[folder_id]
            pages = self.folders.get(folder_id, [[]])
            token = kwargs.get("pageToken")
            index = int(token.rsplit("-p", 1)[1]) if token else 0
            response = {"files": pages[index]}
            if index + 1 < len(pages):
                response["nextPageToken"] = f"{folder_id}-p{index + 1}"
            return response

        file_id = kwargs["fileId"]
        if file_id in self.failures:
            raise self.failures[file_id]
        await kwargs["pipe_to"].write(self.contents.get(file_id, f"content of {file_id}".encode()))
        return None


@pytest.fixture
def bearer_token():
    """Sample bearer credential."""
    return "ya29.test-access-token"


@pytest.fixture
def fake_drive():
    return FakeDrive()


@pytest.fixture
def mock_async_drive_context(fake_drive):
    """Mock aiogoogle instance and Drive service answering from fake_drive."""
    mock_aiogoogle = AsyncMock()
    mock_aiogoogle.oauth2 = Mock()
    mock_aiogoogle.oauth2.authorize.side_effect = lambda request, user_creds: request
    mock_aiogoogle.send.side_effect = fake_drive.handle
    mock_drive_service = fake_drive.build_service()
    return mock_aiogoogle, mock_drive_service


@pytest.fixture
def mock_get_async_drive_service(mock_async_drive_context):
    """Mock the async Drive service context manager used by DriveApiService."""
    with patch('drive_fetcher.services.drive.api_service.async_drive_service') as mock_context:
        mock_context.return_value.__aenter__.return_value = mock_async_drive_context
        mock_context.return_value.__aexit__.return_value = False
        yield mock_context


@pytest.fixture
def sample_listing_response():
    """Sample files.list response with a file, a folder and a Google Doc."""
    return {
        "files": [
            make_file("file_1", "report.txt", "text/plain", "2048"),
            make_folder("folder_1", "Photos"),
            make_file("doc_1", "Meeting notes", DOC_MIME, None),
        ],
        "nextPageToken": "token_page_2",
    }
