# Tests for state generation and authorization URL construction

from urllib.parse import parse_qs, urlparse

import pytest

from github_oauth import (
    AUTHORIZE_URL,
    ConfigurationError,
    build_authorization_url,
    build_redirect_uri,
    create_authorization_request,
    create_state,
)


class TestCreateState:
    def test_consecutive_states_differ(self):
        states = {create_state() for _ in range(200)}
        assert len(states) == 200

    def test_state_carries_at_least_128_bits(self):
        # token_urlsafe(32) encodes 32 bytes in 43 characters
        assert len(create_state()) >= 43

    def test_state_is_url_safe(self):
        state = create_state()
        assert all(c.isalnum() or c in "-_" for c in state)


class TestBuildAuthorizationUrl:
    def test_contains_all_parameters(self):
        url = build_authorization_url(
            client_id="abc",
            redirect_uri="http://localhost:4567/",
            scopes={"repo", "read:org"},
            state="S1",
        )

        assert url.startswith(f"{AUTHORIZE_URL}?")
        assert "client_id=abc" in url
        assert "redirect_uri=http%3A%2F%2Flocalhost%3A4567%2F" in url
        assert "scope=read%3Aorg%20repo" in url
        assert "state=S1" in url

    def test_round_trips_through_a_query_parser(self):
        url = build_authorization_url("abc", "http://localhost:4567/", ["repo", "gist"], "S1")
        params = parse_qs(urlparse(url).query)

        assert params["client_id"] == ["abc"]
        assert params["redirect_uri"] == ["http://localhost:4567/"]
        assert params["scope"][0].split(" ") == ["gist", "repo"]
        assert params["state"] == ["S1"]

    def test_special_characters_are_encoded(self):
        url = build_authorization_url("a b&c", "http://localhost:4567/", ["repo"], "x=y")
        assert "client_id=a%20b%26c" in url
        assert "state=x%3Dy" in url

    def test_custom_authorize_endpoint(self):
        url = build_authorization_url(
            "abc", "http://localhost:1/", ["repo"], "S1",
            authorize_url="https://ghe.example.com/login/oauth/authorize",
        )
        assert url.startswith("https://ghe.example.com/login/oauth/authorize?")

    @pytest.mark.parametrize("client_id", ["", "   "])
    def test_empty_client_id_is_rejected(self, client_id):
        with pytest.raises(ConfigurationError):
            build_authorization_url(client_id, "http://localhost:4567/", ["repo"], "S1")

    def test_empty_state_is_rejected(self):
        with pytest.raises(ConfigurationError):
            build_authorization_url("abc", "http://localhost:4567/", ["repo"], "")


class TestAuthorizationRequest:
    def test_redirect_uri_defaults_to_localhost(self):
        assert build_redirect_uri(4567) == "http://localhost:4567/"

    def test_request_binds_state_into_url(self, credentials):
        request = create_authorization_request(credentials, ["repo"], "http://localhost:4567/")

        params = parse_qs(urlparse(request.url).query)
        assert params["state"] == [request.state]
        assert request.client_id == "abc"
        assert request.scopes == frozenset({"repo"})
        assert request.redirect_uri == "http://localhost:4567/"

    def test_each_request_gets_a_fresh_state(self, credentials):
        first = create_authorization_request(credentials, ["repo"], "http://localhost:4567/")
        second = create_authorization_request(credentials, ["repo"], "http://localhost:4567/")
        assert first.state != second.state

    def test_repr_hides_state(self, credentials):
        request = create_authorization_request(credentials, ["repo"], "http://localhost:4567/")
        assert request.state not in repr(request)
