"""
Tests for settings validation and fail-fast start-up.
"""

import pytest
from pydantic import ValidationError

from ordering_api.core.config import EnvironmentMode, Settings
from ordering_api.main import create_app


def test_env_mode_is_case_insensitive():
    settings = Settings(env_mode="PRODUCTION", jwt_secret="x")
    assert settings.env_mode == EnvironmentMode.PRODUCTION
    assert settings.is_production


def test_invalid_env_mode_rejected():
    with pytest.raises(ValidationError):
        Settings(env_mode="moon")


@pytest.mark.parametrize("rounds", [3, 32])
def test_bcrypt_rounds_bounds(rounds):
    with pytest.raises(ValidationError):
        Settings(bcrypt_rounds=rounds)


def test_token_ttl_must_be_positive():
    with pytest.raises(ValidationError):
        Settings(token_ttl_seconds=0)


def test_defaults():
    settings = Settings(jwt_secret="x")
    assert settings.token_ttl_seconds == 3600
    assert settings.jwt_algorithm == "HS256"
    assert settings.initial_order_status == "Processing"


def test_missing_secret_reported():
    settings = Settings(jwt_secret=None)
    assert "JWT_SECRET" in settings.validate_required_config()


def test_app_refuses_to_start_without_secret(db_path):
    settings = Settings(jwt_secret="", database_url=f"sqlite+aiosqlite:///{db_path}")
    with pytest.raises(RuntimeError, match="JWT_SECRET"):
        create_app(settings)


def test_sqlite_detection(settings):
    assert settings.uses_sqlite
    assert not Settings(database_url="postgresql+psycopg://u:p@h/db").uses_sqlite
