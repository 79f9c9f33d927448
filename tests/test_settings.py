import os

import pytest
from pydantic import ValidationError
from pytest_mock import MockerFixture

from recordflow.settings import ExecutorSettings, GlobalSettings


def test_settings_read_from_env_var(mocker: MockerFixture) -> None:
    mocker.patch.dict(os.environ, {"RECORDFLOW_LOGGER_SETTINGS__LEVEL": "99"}, clear=True)
    settings = GlobalSettings()
    assert settings.logger_settings.level == 99


def test_executor_settings_read_from_env_var(mocker: MockerFixture) -> None:
    mocker.patch.dict(
        os.environ,
        {"RECORDFLOW_EXECUTOR_SETTINGS__KIND": "thread_pool", "RECORDFLOW_EXECUTOR_SETTINGS__MAX_WORKERS": "8"},
        clear=True,
    )
    settings = GlobalSettings()
    assert settings.executor_settings.kind == "thread_pool"
    assert settings.executor_settings.max_workers == 8


def test_settings_default(mocker: MockerFixture) -> None:
    mocker.patch.dict(os.environ, {}, clear=True)
    settings = GlobalSettings()
    assert settings.logger_settings.level == 20
    assert settings.executor_settings.kind == "immediate"
    assert settings.executor_settings.max_workers == 4


def test_executor_settings_reject_unknown_kind() -> None:
    with pytest.raises(ValidationError):
        ExecutorSettings(kind="forked")  # type: ignore[arg-type]

    with pytest.raises(ValidationError):
        ExecutorSettings(max_workers=0)
