"""Tests for output and audit trail formatters."""

import json

import pytest

from vesting_engine.core.models import AuditEntry, TransferInstruction
from vesting_engine.core.types import Operation, TransferReason
from vesting_engine.output.audit_trail import AuditTrailFormatter
from vesting_engine.output.formatters import (
    JSONFormatter,
    TableFormatter,
    format_duration,
    format_timestamp,
)
from vesting_engine.schedule.queries import QueryComposer


class TestHelpers:
    """Tests for value rendering helpers."""

    def test_format_timestamp(self):
        assert format_timestamp(0) == "1970-01-01 00:00:00 UTC"
        assert format_timestamp(None) == "N/A"
        assert format_timestamp(2**64 - 1) == str(2**64 - 1)

    @pytest.mark.parametrize(
        "seconds,expected",
        [
            (0, "0s"),
            (59, "59s"),
            (3600, "1h"),
            (93_784, "1d 2h 3m 4s"),
            (86_400 * 365, "365d"),
        ],
    )
    def test_format_duration(self, seconds, expected):
        assert format_duration(seconds) == expected


class TestJSONFormatter:
    """Tests for JSON output."""

    def test_snapshot(self, cliff_schedule):
        snapshot = QueryComposer().snapshot(cliff_schedule, 500)
        data = json.loads(JSONFormatter().format(snapshot))

        assert data["grantor_id"] == cliff_schedule.grantor_id.hex()
        assert data["vested"] == 500
        assert "tuple" not in data
        assert data["revocation_mode"] == "freeze"

    def test_snapshot_tuple(self, cliff_schedule):
        snapshot = QueryComposer().snapshot(cliff_schedule, 500)
        data = json.loads(JSONFormatter(include_tuple=True).format(snapshot))

        assert data["tuple"] == [
            cliff_schedule.grantor_id.hex(),
            cliff_schedule.beneficiary_id.hex(),
            cliff_schedule.asset_id,
            1000,
            0,
            100,
            1000,
            0,
            500,
            500,
        ]

    def test_instruction(self, beneficiary):
        instruction = TransferInstruction(asset=7, to=beneficiary, amount=42, reason=TransferReason.CLAIM)
        data = json.loads(JSONFormatter(include_tuple=True).format(instruction))

        assert data == {"asset": 7, "to": beneficiary.hex(), "amount": 42, "reason": "claim"}


class TestTableFormatter:
    """Tests for human-readable output."""

    def test_plain_snapshot(self, cliff_schedule):
        snapshot = QueryComposer().snapshot(cliff_schedule, 500)
        output = TableFormatter(use_rich=False).format(snapshot)

        assert output.startswith("VESTING SCHEDULE")
        assert "Vested:" in output
        assert "500" in output
        assert "Revoked:" in output
        assert "Revocation mode: Vested amount frozen at revocation" in output

    def test_plain_status(self, cliff_schedule, beneficiary):
        status = QueryComposer().status(cliff_schedule, beneficiary, 400)
        output = TableFormatter(use_rich=False).format(status)

        assert "VESTING STATUS" in output
        assert "10m" in output

    def test_rich_instruction(self, grantor):
        instruction = TransferInstruction(asset=7, to=grantor, amount=1_500, reason=TransferReason.REVOCATION)
        output = TableFormatter().format(instruction)

        assert "Transfer Instruction" in output
        assert "1,500" in output
        assert "revocation" in output

    def test_unsupported_view(self):
        with pytest.raises(TypeError):
            TableFormatter().format(AuditEntry(operation=Operation.CLAIM))

    def test_format_to_file_is_plain(self, tmp_path, cliff_schedule):
        path = tmp_path / "snapshot.txt"
        TableFormatter().format_to_file(QueryComposer().snapshot(cliff_schedule, 500), str(path))

        text = path.read_text(encoding="utf-8")
        assert text.startswith("VESTING SCHEDULE")
        assert "\x1b[" not in text

    def test_rescale_mode_description(self, make_schedule):
        schedule = make_schedule(revocation_mode="rescale")
        output = TableFormatter(use_rich=False).format(QueryComposer().snapshot(schedule, 500))

        assert "Linear curve rescaled to the revoked total" in output


class TestAuditTrailFormatter:
    """Tests for the audit trail summary."""

    def test_empty(self):
        summary = AuditTrailFormatter().format_summary([], "alice")
        assert "AUDIT TRAIL: alice" in summary
        assert "No operations recorded" in summary

    def test_summary(self, grantor, beneficiary):
        entries = [
            AuditEntry(operation=Operation.CREATE, caller=grantor, amount=1000),
            AuditEntry(
                operation=Operation.CLAIM,
                caller=beneficiary,
                now=50,
                success=False,
                error_type="NotYetVestedError",
                error_message="Cliff not reached",
            ),
            AuditEntry(operation=Operation.CLAIM, caller=beneficiary, now=500, amount=500),
        ]
        summary = AuditTrailFormatter().format_summary(entries)

        assert "Operations: 3 (2 succeeded, 1 rejected)" in summary
        assert "claim: 500" in summary
        assert "create: 1,000" in summary
        assert "REJECTED" in summary
        assert "Error: NotYetVestedError: Cliff not reached" in summary
        assert f"Caller: {beneficiary.hex()}, now=500" in summary

    def test_format_to_file(self, tmp_path):
        path = tmp_path / "audit.txt"
        AuditTrailFormatter().format_to_file([], str(path), "alice")
        assert "END OF AUDIT TRAIL" not in path.read_text(encoding="utf-8")
        assert "AUDIT TRAIL: alice" in path.read_text(encoding="utf-8")
