import pytest
import requests

from propublica990.clients.propublica_client import ProPublicaClient, fetch_org, org_page_url, org_url
from propublica990.config import Config
from propublica990.errors import FetchError


class FakeResponse:
    def __init__(self, payload=None, status=200, bad_json=False):
        self.payload = payload
        self.status_code = status
        self.bad_json = bad_json

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Client Error: Not Found")

    def json(self):
        if self.bad_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self.payload


class FakeSession:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.urls = []
        self.headers = []

    def get(self, url, headers=None):
        self.urls.append(url)
        self.headers.append(headers)
        if self.exc:
            raise self.exc
        return self.response

    def close(self):
        pass


@pytest.fixture
def cfg():
    return Config(api_base="https://example.test/orgs/", api_suffix=".json", user_agent="tests")


def test_org_url_uses_base_and_suffix(cfg):
    assert org_url("470825376", cfg) == "https://example.test/orgs/470825376.json"
    assert org_page_url("470825376").endswith("/nonprofits/organizations/470825376")


def test_default_endpoint(monkeypatch):
    monkeypatch.delenv("PP990_API_BASE", raising=False)
    monkeypatch.delenv("PP990_API_SUFFIX", raising=False)
    assert org_url("1") == "https://projects.propublica.org/nonprofits/api/v2/organizations/1.json"


def test_fetch_org_success(cfg):
    payload = {"organization": {"name": "X"}, "filings_with_data": []}
    session = FakeSession(FakeResponse(payload))
    assert fetch_org("1", cfg, session) == payload
    assert session.urls == ["https://example.test/orgs/1.json"]
    assert session.headers[0]["User-Agent"] == "tests"


@pytest.mark.parametrize(
    "session",
    [
        FakeSession(FakeResponse(status=404)),
        FakeSession(exc=requests.exceptions.ConnectionError("boom")),
        FakeSession(FakeResponse(bad_json=True)),
        FakeSession(FakeResponse(payload=["not", "an", "object"])),
    ],
)
def test_fetch_org_failures_become_fetch_error(cfg, session):
    with pytest.raises(FetchError) as exc:
        fetch_org("999", cfg, session)
    assert exc.value.ein == "999"
    assert "999" in str(exc.value)


def test_client_is_a_fetcher(cfg):
    session = FakeSession(FakeResponse({"organization": {}}))
    client = ProPublicaClient(cfg, session)
    assert client("5") == {"organization": {}}
    client.close()
