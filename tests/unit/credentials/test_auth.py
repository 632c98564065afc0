"""Tests for TokenAuth and the credential data types."""

from datetime import datetime, timezone

import httpx
import pytest
from pydantic import ValidationError

from ghapp.credentials.auth import TokenAuth
from ghapp.credentials.models import AccessToken, AppConfig
from tests.helpers import RSA_PRIVATE_PEM_PKCS8


class _StaticSource:
    def __init__(self, *tokens: AccessToken) -> None:
        self._tokens = list(tokens)
        self.calls = 0

    def token(self) -> AccessToken:
        tok = self._tokens[min(self.calls, len(self._tokens) - 1)]
        self.calls += 1
        return tok


class TestTokenAuth:
    def test_sets_authorization_header(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.headers["Authorization"])
            return httpx.Response(200)

        source = _StaticSource(AccessToken(value="ghs_1"))
        with httpx.Client(transport=httpx.MockTransport(handler), auth=TokenAuth(source)) as client:
            client.get("https://api.github.com/rate_limit")
        assert seen == ["token ghs_1"]

    def test_token_fetched_per_request(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.headers["Authorization"])
            return httpx.Response(200)

        source = _StaticSource(AccessToken(value="a"), AccessToken(value="b", token_type="Bearer"))
        with httpx.Client(transport=httpx.MockTransport(handler), auth=TokenAuth(source)) as client:
            client.get("https://api.github.com/")
            client.get("https://api.github.com/")
        assert seen == ["token a", "Bearer b"]
        assert source.calls == 2


class TestModels:
    def test_app_config_from_json(self):
        raw = '{"app_id": "1", "installation_id": "2", "private_key": "pem"}'
        config = AppConfig.model_validate_json(raw)
        assert config.app_id == "1"
        assert config.installation_id == "2"

    def test_app_config_frozen(self):
        config = AppConfig(app_id="1", installation_id="2", private_key=RSA_PRIVATE_PEM_PKCS8)
        with pytest.raises(ValidationError):
            config.app_id = "3"

    def test_app_config_repr_hides_key(self):
        config = AppConfig(app_id="1", installation_id="2", private_key=RSA_PRIVATE_PEM_PKCS8)
        assert "PRIVATE" not in repr(config)
        assert "PRIVATE" not in str(config)

    def test_access_token_repr_hides_value(self):
        tok = AccessToken(value="ghs_secret", expiry=datetime(2030, 1, 1, tzinfo=timezone.utc))
        assert "ghs_secret" not in repr(tok)
        assert tok.authorization == "token ghs_secret"
