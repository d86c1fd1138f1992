from __future__ import annotations

import pytest
from pydantic import ValidationError

from shelter_platform.settings import Settings


def test_bypass_rejected_in_prod() -> None:
    with pytest.raises(ValidationError):
        Settings(env="prod", disable_auth=True)


def test_secret_hidden_from_repr() -> None:
    assert "s3cr3t" not in repr(Settings(jwt_secret="s3cr3t"))


def test_cognito_requires_pool_and_client() -> None:
    assert not Settings(cognito_user_pool_id="us-east-1_abc").cognito_configured
    s = Settings(
        cognito_region="eu-west-1", cognito_user_pool_id="eu-west-1_abc", cognito_client_id="c"
    )
    assert s.cognito_configured
    assert s.cognito_issuer == "https://cognito-idp.eu-west-1.amazonaws.com/eu-west-1_abc"


def test_env_prefix(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SHELTER_STRICT_ROLE_IDS", "true")
    monkeypatch.setenv("SHELTER_LOG_FORMAT", "console")
    s = Settings()
    assert s.strict_role_ids is True
    assert s.log_format == "console"
