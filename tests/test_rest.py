from cookbookfs.errors import RemoteListingError
from cookbookfs.errors import RestOperationError
from cookbookfs.interfaces import ISession
from cookbookfs.rest import RestSession

import httpx
import json
import pytest


SERVER = "https://chef.example.com"


@pytest.fixture
def session():
    with RestSession(SERVER, client_name="knife") as s:
        yield s


class TestSessionInterface:
    def test_interface_provided(self, session):
        assert ISession.providedBy(session)


class TestConstruction:
    def test_base_url(self):
        with RestSession(f"{SERVER}/") as s:
            assert s.base_url == SERVER

    def test_organization(self):
        with RestSession(SERVER, organization="acme") as s:
            assert s.base_url == f"{SERVER}/organizations/acme"

    def test_invalid_url(self):
        with pytest.raises(ValueError):
            RestSession("chef.example.com")

    def test_invalid_organization(self):
        with pytest.raises(ValueError):
            RestSession(SERVER, organization="../admin")

    def test_disabled_tls_warns(self, caplog):
        with RestSession(SERVER, verify_ssl=False):
            pass
        assert "TLS verification is disabled" in caplog.text


class TestGetJson:
    def test_decodes_json(self, session, httpx_mock):
        httpx_mock.add_response(url=f"{SERVER}/cookbooks", json={"a": 1})
        assert session.get_json("cookbooks") == {"a": 1}

    def test_params(self, session, httpx_mock):
        httpx_mock.add_response(url=f"{SERVER}/cookbooks?num_versions=all", json={})
        session.get_json("cookbooks", params={"num_versions": "all"})

    def test_headers(self, session, httpx_mock):
        httpx_mock.add_response(url=f"{SERVER}/cookbooks", json={})
        session.get_json("cookbooks")
        [request] = httpx_mock.get_requests()
        assert request.headers["Accept"] == "application/json"
        assert request.headers["X-Ops-UserId"] == "knife"

    def test_empty_body(self, session, httpx_mock):
        httpx_mock.add_response(url=f"{SERVER}/cookbooks", status_code=204)
        assert session.get_json("cookbooks") is None

    def test_http_error(self, session, httpx_mock):
        httpx_mock.add_response(url=f"{SERVER}/cookbooks", status_code=401)
        with pytest.raises(RemoteListingError) as exc_info:
            session.get_json("cookbooks")
        assert exc_info.value.status_code == 401
        assert isinstance(exc_info.value.__cause__, httpx.HTTPStatusError)

    def test_transport_error(self, session, httpx_mock):
        httpx_mock.add_exception(httpx.ReadTimeout("timed out"))
        with pytest.raises(RemoteListingError) as exc_info:
            session.get_json("cookbooks")
        assert exc_info.value.status_code is None

    def test_no_retry(self, session, httpx_mock):
        httpx_mock.add_response(url=f"{SERVER}/cookbooks", status_code=503)
        with pytest.raises(RemoteListingError):
            session.get_json("cookbooks")
        assert len(httpx_mock.get_requests()) == 1


class TestWrites:
    def test_put_json(self, session, httpx_mock):
        httpx_mock.add_response(method="PUT", url=f"{SERVER}/x?force=true", json={"ok": True})
        assert session.put_json("x", {"a": 1}, params={"force": "true"}) == {"ok": True}
        assert json.loads(httpx_mock.get_requests()[0].content) == {"a": 1}

    def test_post_json(self, session, httpx_mock):
        httpx_mock.add_response(method="POST", url=f"{SERVER}/sandboxes", json={"uri": "u"})
        assert session.post_json("sandboxes", {}) == {"uri": "u"}

    def test_write_error_is_not_a_listing_error(self, session, httpx_mock):
        httpx_mock.add_response(method="PUT", url=f"{SERVER}/x", status_code=409)
        with pytest.raises(RestOperationError) as exc_info:
            session.put_json("x", {})
        assert not isinstance(exc_info.value, RemoteListingError)
        assert exc_info.value.status_code == 409

    def test_absolute_url(self, session, httpx_mock):
        httpx_mock.add_response(method="PUT", url="https://files.example.com/abc")
        session.put_bytes("https://files.example.com/abc", b"data", {"X-Test": "1"})
        [request] = httpx_mock.get_requests()
        assert request.content == b"data"
        assert request.headers["X-Test"] == "1"

    def test_get_bytes(self, session, httpx_mock):
        httpx_mock.add_response(url="https://files.example.com/abc", content=b"raw")
        assert session.get_bytes("https://files.example.com/abc") == b"raw"
