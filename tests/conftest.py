"""Pytest configuration and fixtures for vesting engine tests."""

from pathlib import Path
from typing import Callable

import pytest

from vesting_engine.core.config import ENV_VARS, EngineConfig
from vesting_engine.core.models import VestingSchedule
from vesting_engine.core.types import RevocationMode
from vesting_engine.engine import VestingEngine
from vesting_engine.service import VestingService

GRANTOR = bytes.fromhex("c0ffee01")
BENEFICIARY = bytes.fromhex("b0b0b0b0")
STRANGER = bytes.fromhex("deadbeef")
ASSET_ID = 31566704


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep host VESTING_* variables out of every test."""
    for env_var in ENV_VARS.values():
        monkeypatch.delenv(env_var, raising=False)


@pytest.fixture
def grantor() -> bytes:
    return GRANTOR


@pytest.fixture
def beneficiary() -> bytes:
    return BENEFICIARY


@pytest.fixture
def stranger() -> bytes:
    return STRANGER


@pytest.fixture
def make_schedule() -> Callable[..., VestingSchedule]:
    """Factory for schedules with scenario-1 defaults."""

    def _make(**overrides) -> VestingSchedule:
        fields = {
            "grantor_id": GRANTOR,
            "beneficiary_id": BENEFICIARY,
            "asset_id": ASSET_ID,
            "total_tokens": 1000,
            "start_time": 0,
            "cliff_time": 100,
            "duration": 1000,
            "claimed_tokens": 0,
            "revocation_mode": RevocationMode.FREEZE,
        }
        fields.update(overrides)
        return VestingSchedule(**fields)

    return _make


@pytest.fixture
def cliff_schedule(make_schedule) -> VestingSchedule:
    """total=1000, start=0, cliff=100, duration=1000."""
    return make_schedule()


@pytest.fixture
def linear_schedule(make_schedule) -> VestingSchedule:
    """total=1000, start=0, cliff=0, duration=1000."""
    return make_schedule(cliff_time=0)


@pytest.fixture
def config(tmp_path: Path) -> EngineConfig:
    return EngineConfig(authority=GRANTOR.hex(), data_dir=tmp_path / "schedules")


@pytest.fixture
def engine(config: EngineConfig) -> VestingEngine:
    return VestingEngine(config=config)


@pytest.fixture
def rescale_engine(config: EngineConfig) -> VestingEngine:
    return VestingEngine(config=config, revocation_mode=RevocationMode.RESCALE)


@pytest.fixture
def service(config: EngineConfig) -> VestingService:
    return VestingService(config=config)
