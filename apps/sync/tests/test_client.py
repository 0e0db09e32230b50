import json
from unittest.mock import MagicMock

import pytest
import requests

from apps.sync.client import ApiClient, RemoteError


def make_response(status_code=200, body=None, raw=None):
    response = requests.Response()
    response.status_code = status_code
    if raw is not None:
        response._content = raw
    elif body is not None:
        response._content = json.dumps(body).encode()
    else:
        response._content = b""
    response.headers["Content-Type"] = "application/json"
    return response


@pytest.fixture
def http():
    return MagicMock(spec=requests.Session)


@pytest.fixture
def client(http):
    return ApiClient(base_url="http://central.test/api/", token="secret", timeout=3, session=http)


class TestApiClient:
    def test_unwraps_envelope(self, client, http):
        http.request.return_value = make_response(body={"success": True, "data": [{"id": "p-1"}]})

        assert client.get("/products") == [{"id": "p-1"}]

        http.request.assert_called_once_with(
            "GET",
            "http://central.test/api/products",
            json=None,
            headers={"Accept": "application/json", "Authorization": "Bearer secret"},
            timeout=3,
        )

    def test_post_sends_json_body(self, client, http):
        http.request.return_value = make_response(201, {"success": True, "data": {"id": "srv-1"}})

        assert client.post("/sessions", {"productId": "p-1"}) == {"id": "srv-1"}

        args, kwargs = http.request.call_args
        assert args == ("POST", "http://central.test/api/sessions")
        assert kwargs["json"] == {"productId": "p-1"}
        assert kwargs["headers"]["Content-Type"] == "application/json"

    def test_no_authorization_header_without_token(self, http):
        client = ApiClient(base_url="http://central.test/api", token="", session=http)
        http.request.return_value = make_response(body={"success": True, "data": None})

        client.delete("/sessions/srv-1")

        assert "Authorization" not in http.request.call_args.kwargs["headers"]

    def test_network_error_raises_remote_error(self, client, http):
        http.request.side_effect = requests.ConnectionError("connection refused")

        with pytest.raises(RemoteError) as excinfo:
            client.patch("/sessions/srv-1", {"status": "CLOSED"})

        assert excinfo.value.status_code is None
        assert "connection refused" in str(excinfo.value)

    def test_timeout_raises_remote_error(self, client, http):
        http.request.side_effect = requests.Timeout("read timed out")

        with pytest.raises(RemoteError):
            client.get("/workstations")

    def test_http_error_uses_server_message(self, client, http):
        http.request.return_value = make_response(400, {"success": False, "error": "Invalid product"})

        with pytest.raises(RemoteError) as excinfo:
            client.post("/sessions", {"productId": "nope"})

        assert excinfo.value.status_code == 400
        assert str(excinfo.value) == "Invalid product"

    def test_http_error_without_json_body(self, client, http):
        http.request.return_value = make_response(502, raw=b"<html>Bad Gateway</html>")

        with pytest.raises(RemoteError) as excinfo:
            client.get("/products")

        assert excinfo.value.status_code == 502
        assert "HTTP 502" in str(excinfo.value)

    def test_unsuccessful_envelope_raises(self, client, http):
        http.request.return_value = make_response(200, {"success": False, "error": "Session is closed"})

        with pytest.raises(RemoteError, match="Session is closed"):
            client.patch("/sessions/srv-1", {"activeTime": 5})

    def test_non_object_body_raises(self, client, http):
        http.request.return_value = make_response(200, [1, 2, 3])

        with pytest.raises(RemoteError, match="invalid body"):
            client.get("/products")

    def test_empty_success_body_returns_none(self, client, http):
        http.request.return_value = make_response(204)

        assert client.delete("/sessions/defects/srv-9") is None

    def test_reachability_ignores_status_code(self, client, http):
        http.request.return_value = make_response(404)

        assert client.is_reachable() is True
        assert http.request.call_args.args == ("HEAD", "http://central.test/api")

    def test_unreachable_on_network_error(self, client, http):
        http.request.side_effect = requests.ConnectionError("no route to host")

        assert client.is_reachable() is False
