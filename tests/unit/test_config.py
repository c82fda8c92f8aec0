"""Settings validation."""

import pytest
from pydantic import ValidationError

from propertyops.core.config import Settings


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("DATABASE_URL", "WORKFLOW_ACTION_TIMEOUT_SECONDS", "WORKFLOW_DISPATCH_ENABLED"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings(_env_file=None)
    assert settings.database_url == ""
    assert settings.workflow_action_timeout_seconds is None
    assert settings.workflow_dispatch_enabled is True


def test_async_database_url_is_accepted() -> None:
    settings = Settings(
        _env_file=None,
        database_url="postgresql+asyncpg://u:p@localhost:5432/propertyops",
    )
    assert settings.database_url.startswith("postgresql+asyncpg")


def test_sync_database_url_is_rejected() -> None:
    with pytest.raises(ValidationError, match="async driver"):
        Settings(_env_file=None, database_url="postgresql://u:p@localhost/db")


@pytest.mark.parametrize("timeout", [0, -1.5])
def test_non_positive_action_timeout_is_rejected(timeout) -> None:
    with pytest.raises(ValidationError, match="must be positive"):
        Settings(_env_file=None, workflow_action_timeout_seconds=timeout)


def test_sample_rate_bounds() -> None:
    with pytest.raises(ValidationError):
        Settings(_env_file=None, telemetry_sample_rate=1.5)
