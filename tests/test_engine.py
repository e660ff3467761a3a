"""Tests for the vesting engine facade and its audit trail."""

import pytest

from vesting_engine.core.config import EngineConfig
from vesting_engine.core.exceptions import (
    AuthorizationError,
    InvalidScheduleError,
    NotYetVestedError,
    ScheduleAlreadyExistsError,
    ScheduleNotFoundError,
)
from vesting_engine.core.models import VestingSchedule
from vesting_engine.core.types import Operation, RevocationMode
from vesting_engine.engine import VestingEngine


def _create(engine: VestingEngine, caller: bytes, beneficiary: bytes, **overrides) -> VestingSchedule:
    params = {
        "asset_id": 7,
        "total": 1000,
        "start": 0,
        "cliff": 100,
        "duration": 1000,
    }
    params.update(overrides)
    return engine.create_vesting(caller, beneficiary, **params)


class TestEngineLifecycle:
    """End-to-end runs through the engine."""

    def test_create_claim_revoke(self, engine, grantor, beneficiary):
        schedule = _create(engine, grantor, beneficiary)
        assert schedule.grantor_id == grantor
        assert engine.vested(schedule, 500) == 500

        claimed = engine.claim(schedule, beneficiary, 300)
        assert claimed.instruction.amount == 300

        revoked = engine.revoke(claimed.schedule, grantor, 600)
        assert revoked.instruction.amount == 400
        assert revoked.instruction.to == grantor

        info = engine.get_vesting_info(revoked.schedule, 900)
        assert info.total_tokens == 600
        assert info.claimed_tokens == 300
        assert info.vested == 600
        assert info.claimable == 300

        status = engine.get_user_status(revoked.schedule, beneficiary, 900)
        assert status.is_beneficiary
        assert status.claimable == 300

    def test_engine_mode_override(self, rescale_engine, grantor, beneficiary):
        schedule = _create(rescale_engine, grantor, beneficiary, cliff=0)
        assert schedule.revocation_mode == RevocationMode.RESCALE

        revoked = rescale_engine.revoke(schedule, grantor, 500).schedule
        assert rescale_engine.vested(revoked, 750) == 375

    def test_config_mode(self, tmp_path, grantor, beneficiary):
        config = EngineConfig(revocation_mode="rescale", authority=grantor.hex(), data_dir=tmp_path)
        schedule = _create(VestingEngine(config=config), grantor, beneficiary)
        assert schedule.revocation_mode == RevocationMode.RESCALE


class TestAuthority:
    """Tests for resolving the creator identity."""

    def test_configured_authority_enforced(self, engine, beneficiary, stranger):
        with pytest.raises(AuthorizationError):
            _create(engine, stranger, beneficiary)

    def test_explicit_authority_overrides_config(self, engine, beneficiary, stranger):
        schedule = _create(engine, stranger, beneficiary, authority=stranger)
        assert schedule.grantor_id == stranger

    def test_caller_is_authority_when_unconfigured(self, tmp_path, beneficiary, stranger):
        engine = VestingEngine(config=EngineConfig(data_dir=tmp_path))
        schedule = _create(engine, stranger, beneficiary)
        assert schedule.grantor_id == stranger

    def test_constructor_authority(self, tmp_path, beneficiary, stranger):
        engine = VestingEngine(config=EngineConfig(data_dir=tmp_path), authority=stranger)
        with pytest.raises(AuthorizationError):
            _create(engine, beneficiary, beneficiary)


class TestCreationPolicy:
    """Tests for re-creation and invalid parameters."""

    def test_double_create_is_rejected(self, engine, grantor, beneficiary):
        """An occupied slot is never reset; claimed tokens survive."""
        schedule = _create(engine, grantor, beneficiary)
        claimed = engine.claim(schedule, beneficiary, 500).schedule

        with pytest.raises(ScheduleAlreadyExistsError):
            _create(engine, grantor, beneficiary, existing=claimed, schedule_id="alice")
        assert claimed.claimed_tokens == 500

    @pytest.mark.parametrize("overrides", [{"total": 0}, {"duration": 0}, {"total": 0, "duration": 0}])
    def test_zero_total_or_duration(self, engine, grantor, beneficiary, overrides):
        with pytest.raises(InvalidScheduleError):
            _create(engine, grantor, beneficiary, **overrides)


class TestAuditTrail:
    """Every attempted operation is audited."""

    def test_success_and_rejection_recorded(self, engine, grantor, beneficiary, stranger):
        schedule = _create(engine, grantor, beneficiary, schedule_id="alice")
        with pytest.raises(NotYetVestedError):
            engine.claim(schedule, beneficiary, 10, schedule_id="alice")
        engine.claim(schedule, beneficiary, 250, schedule_id="alice")
        with pytest.raises(AuthorizationError):
            engine.revoke(schedule, stranger, 300, schedule_id="alice")

        trail = engine.audit_trail
        assert [e.operation for e in trail] == [
            Operation.CREATE,
            Operation.CLAIM,
            Operation.CLAIM,
            Operation.REVOKE,
        ]
        assert [e.success for e in trail] == [True, False, True, False]
        assert trail[0].amount == 1000
        assert trail[1].error_type == "NotYetVestedError"
        assert trail[2].amount == 250
        assert trail[2].now == 250
        assert trail[3].caller == stranger
        assert all(e.schedule_id == "alice" for e in trail)

    def test_queries_are_not_audited(self, engine, grantor, beneficiary):
        schedule = _create(engine, grantor, beneficiary)
        engine.drain_audit()

        engine.vested(schedule, 500)
        engine.get_vesting_info(schedule, 500)
        engine.get_user_status(schedule, beneficiary, 500)

        assert engine.audit_trail == []

    def test_drain_clears(self, engine, grantor, beneficiary):
        _create(engine, grantor, beneficiary)

        drained = engine.drain_audit()
        assert len(drained) == 1
        assert engine.audit_trail == []

    def test_rejection_is_logged(self, engine, beneficiary, stranger, caplog):
        with caplog.at_level("WARNING", logger="vesting_engine.engine"):
            with pytest.raises(AuthorizationError):
                _create(engine, stranger, beneficiary)
        assert "create rejected" in caplog.text

    def test_failed_commit_is_audited_as_rejection(self, engine, grantor, beneficiary):
        """An operation whose result cannot be stored is recorded only as rejected."""
        schedule = _create(engine, grantor, beneficiary)
        engine.drain_audit()

        def lost_record(result):
            raise ScheduleNotFoundError("alice")

        with pytest.raises(ScheduleNotFoundError):
            engine.claim(schedule, beneficiary, 500, schedule_id="alice", commit=lost_record)

        trail = engine.audit_trail
        assert len(trail) == 1
        assert trail[0].success is False
        assert trail[0].amount is None
        assert trail[0].error_type == "ScheduleNotFoundError"

    def test_commit_receives_result(self, engine, grantor, beneficiary):
        committed = []
        schedule = _create(engine, grantor, beneficiary, commit=committed.append)

        assert committed == [schedule]
        assert engine.audit_trail[-1].success is True
