"""
Shared fixtures: a fake Luarmor API served through httpx.MockTransport.
"""
import httpx
import pytest

from luarmor_updater.client import LuarmorClient, RateLimiter

BASE_URL = "https://api.luarmor.test/v3"
API_KEY = "test-api-key-0123456789"


def details_payload(*projects):
    """Build a key details body from (project_id, {script_id: version}) pairs."""
    return {
        "success": True,
        "projects": [
            {
                "id": project_id,
                "name": f"{project_id} name",
                "scripts": [
                    {"script_id": sid, "script_name": f"{sid}.lua", "script_version": version}
                    for sid, version in scripts.items()
                ],
            }
            for project_id, scripts in projects
        ],
    }


class SleepRecorder:
    """Stands in for asyncio.sleep and remembers every delay."""

    def __init__(self):
        self.calls = []

    async def __call__(self, seconds):
        self.calls.append(seconds)


class FakeLuarmor:
    """Serves queued key details and a fixed upload status."""

    def __init__(self, details, upload_status=200, upload_body=None):
        self.details = details if isinstance(details, list) else [details]
        self.upload_status = upload_status
        self.upload_body = upload_body if upload_body is not None else {"success": True}
        self.requests = []
        self.detail_calls = 0

    @property
    def uploads(self):
        return [r for r in self.requests if r.method == "PUT"]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "GET" and request.url.path.endswith("/details"):
            index = min(self.detail_calls, len(self.details) - 1)
            self.detail_calls += 1
            return httpx.Response(200, json=self.details[index])
        if request.method == "PUT":
            return httpx.Response(self.upload_status, json=self.upload_body)
        return httpx.Response(404, json={"success": False, "message": "not found"})

    def client(self, sleep=None):
        return LuarmorClient(
            base_url=BASE_URL,
            transport=httpx.MockTransport(self.handler),
            rate_limiter=RateLimiter(sleep=sleep or SleepRecorder()),
        )


@pytest.fixture
def sleeper():
    return SleepRecorder()


@pytest.fixture
def script_file(tmp_path):
    path = tmp_path / "main.lua"
    path.write_text('print("hello from ci")\n', encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Keep the runner's own variables out of the tests."""
    for name in ("INPUT_API-KEY", "INPUT_SCRIPT-ID", "INPUT_PROJECT-ID", "INPUT_FILE"):
        monkeypatch.delenv(name, raising=False)
    for name in ("LUARMOR_BASE_URL", "LUARMOR_POLL_INTERVAL", "LUARMOR_MAX_POLLS"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv("GITHUB_OUTPUT", raising=False)
    monkeypatch.chdir(tmp_path)
