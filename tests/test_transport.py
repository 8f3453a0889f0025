"""Tests for the httpx token transport."""

from urllib.parse import parse_qs

import httpx
import pytest

from ticktick_auth.oauth import (
    HttpxTokenTransport,
    TokenExchangeFailedError,
    begin_auth,
)
from ticktick_auth.oauth.transport import TOKEN_URL


def make_transport(handler) -> HttpxTokenTransport:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return HttpxTokenTransport(client=client)


class TestHttpxTokenTransport:
    """Test token requests over a mocked HTTP layer."""

    def test_posts_form_to_token_url(self):
        """Should POST form-encoded params to the token endpoint."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"access_token": "tok_1"})

        transport = make_transport(handler)
        response = transport.send_token_request({"code": "XYZ", "grant_type": "authorization_code"})

        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == TOKEN_URL
        assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert parse_qs(request.content.decode()) == {
            "code": ["XYZ"],
            "grant_type": ["authorization_code"],
        }
        assert response.status_code == 200
        assert response.payload == {"access_token": "tok_1"}
        assert response.ok is True

    def test_error_status_is_returned(self):
        """Should hand error responses back for the flow to interpret."""
        transport = make_transport(
            lambda request: httpx.Response(401, json={"error": "invalid_client"})
        )
        response = transport.send_token_request({})

        assert response.status_code == 401
        assert response.ok is False
        assert response.payload == {"error": "invalid_client"}

    def test_non_json_body(self):
        """Should return payload None for non-JSON bodies."""
        transport = make_transport(lambda request: httpx.Response(503, text="Service Unavailable"))
        response = transport.send_token_request({})

        assert response.payload is None
        assert response.text == "Service Unavailable"

    def test_json_array_body(self):
        """Should treat a non-object JSON body as no payload."""
        transport = make_transport(lambda request: httpx.Response(200, json=["tok"]))
        assert transport.send_token_request({}).payload is None

    def test_timeout_raises_exchange_failed(self):
        """Should surface timeouts as TokenExchangeFailedError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        transport = make_transport(handler)
        with pytest.raises(TokenExchangeFailedError, match="timed out"):
            transport.send_token_request({})

    def test_connect_error_raises_exchange_failed(self):
        """Should surface connection failures as TokenExchangeFailedError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        transport = make_transport(handler)
        with pytest.raises(TokenExchangeFailedError, match="Token request failed"):
            transport.send_token_request({})

    def test_does_not_close_injected_client(self):
        """Should leave a caller-supplied client open."""
        client = httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        with HttpxTokenTransport(client=client):
            pass
        assert client.is_closed is False
        client.close()

    def test_closes_own_client(self):
        """Should close the client it created."""
        transport = HttpxTokenTransport()
        transport.close()
        assert transport._client.is_closed is True


class TestFlowOverHttp:
    """Run the authorization flow against a mocked token endpoint."""

    def test_full_flow(self):
        """Should exchange the code through the httpx transport."""
        flow = begin_auth("abc123", "http://localhost:8080")
        sent = []

        def handler(request: httpx.Request) -> httpx.Response:
            sent.append(parse_qs(request.content.decode()))
            return httpx.Response(
                200,
                json={"access_token": "tok_1", "token_type": "bearer", "expires_in": 3600},
            )

        with make_transport(handler) as transport:
            token = flow.finish_auth("secret", "XYZ", flow.state, transport=transport)

        assert token.token == "tok_1"
        assert sent[0]["client_secret"] == ["secret"]
        assert sent[0]["redirect_uri"] == ["http://localhost:8080"]

    def test_http_error(self):
        """Should carry the status and provider message from the endpoint."""
        flow = begin_auth("abc123", "http://localhost:8080")

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                400, json={"error": "invalid_grant", "error_description": "Invalid code"}
            )

        with pytest.raises(TokenExchangeFailedError) as exc_info:
            flow.finish_auth("secret", "XYZ", flow.state, transport=make_transport(handler))

        assert exc_info.value.status_code == 400
        assert exc_info.value.error_description == "Invalid code"
