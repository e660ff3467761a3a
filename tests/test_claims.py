"""Tests for the claim processor."""

import pytest

from vesting_engine.core.exceptions import (
    AuthorizationError,
    NothingToClaimError,
    NotYetVestedError,
)
from vesting_engine.core.types import RevocationMode, TransferReason
from vesting_engine.schedule.claims import ClaimProcessor


class TestClaimWalkthrough:
    """total=1000, start=0, cliff=100, duration=1000, claimed step by step."""

    def test_full_walkthrough(self, cliff_schedule, beneficiary):
        processor = ClaimProcessor()

        with pytest.raises(NotYetVestedError) as exc_info:
            processor.claim(cliff_schedule, beneficiary, 50)
        assert exc_info.value.cliff_time == 100

        result = processor.claim(cliff_schedule, beneficiary, 100)
        assert result.instruction.amount == 100
        assert result.schedule.claimed_tokens == 100

        result = processor.claim(result.schedule, beneficiary, 500)
        assert result.instruction.amount == 400
        assert result.schedule.claimed_tokens == 500

        result = processor.claim(result.schedule, beneficiary, 1000)
        assert result.instruction.amount == 500
        assert result.schedule.claimed_tokens == 1000

        with pytest.raises(NothingToClaimError):
            processor.claim(result.schedule, beneficiary, 2000)

    def test_instruction_pays_beneficiary(self, cliff_schedule, beneficiary):
        instruction = ClaimProcessor().claim(cliff_schedule, beneficiary, 250).instruction

        assert instruction.to == beneficiary
        assert instruction.asset == cliff_schedule.asset_id
        assert instruction.reason == TransferReason.CLAIM


class TestClaimRejections:
    """Tests for rejected claims."""

    def test_only_beneficiary_may_claim(self, cliff_schedule, grantor, stranger):
        for caller in (grantor, stranger, b""):
            with pytest.raises(AuthorizationError) as exc_info:
                ClaimProcessor().claim(cliff_schedule, caller, 500)
            assert exc_info.value.required_role == "beneficiary"

    def test_authorization_checked_before_cliff(self, cliff_schedule, stranger):
        with pytest.raises(AuthorizationError):
            ClaimProcessor().claim(cliff_schedule, stranger, 0)

    def test_nothing_to_claim_at_same_time(self, cliff_schedule, beneficiary):
        """A second claim at the same instant finds nothing new."""
        processor = ClaimProcessor()
        result = processor.claim(cliff_schedule, beneficiary, 300)

        with pytest.raises(NothingToClaimError) as exc_info:
            processor.claim(result.schedule, beneficiary, 300)
        assert exc_info.value.vested == 300
        assert exc_info.value.claimed == 300

    def test_rejected_claim_leaves_schedule_unchanged(self, cliff_schedule, beneficiary, stranger):
        before = cliff_schedule.model_dump()

        with pytest.raises(AuthorizationError):
            ClaimProcessor().claim(cliff_schedule, stranger, 500)
        with pytest.raises(NotYetVestedError):
            ClaimProcessor().claim(cliff_schedule, beneficiary, 10)

        assert cliff_schedule.model_dump() == before

    def test_successful_claim_returns_new_value(self, cliff_schedule, beneficiary):
        result = ClaimProcessor().claim(cliff_schedule, beneficiary, 500)

        assert cliff_schedule.claimed_tokens == 0
        assert result.schedule is not cliff_schedule


class TestClaimInvariants:
    """claimed never exceeds vested, across any claim sequence."""

    def test_claims_never_exceed_vested(self, make_schedule, beneficiary):
        processor = ClaimProcessor()
        schedule = make_schedule(total_tokens=997, cliff_time=0, duration=13)
        paid = 0

        for now in range(0, 20):
            try:
                result = processor.claim(schedule, beneficiary, now)
            except NothingToClaimError:
                continue
            schedule = result.schedule
            paid += result.instruction.amount
            assert schedule.claimed_tokens == paid
            assert schedule.claimed_tokens <= processor.calculator.vested(schedule, now)

        assert paid == 997

    def test_claim_after_rescaled_revocation(self, make_schedule, beneficiary):
        """Claiming is rejected while the rescaled curve sits below claimed."""
        schedule = make_schedule(
            cliff_time=0,
            total_tokens=500,
            claimed_tokens=500,
            revoked_at=500,
            revocation_mode=RevocationMode.RESCALE,
        )
        with pytest.raises(NothingToClaimError):
            ClaimProcessor().claim(schedule, beneficiary, 750)
