"""Tests for PackCutListCommand."""

from __future__ import annotations

from pathlib import Path

import pytest

from panelcut.application import PackCutListCommand
from panelcut.application.config import load_config, load_config_from_dict
from panelcut.domain.exceptions import (
    InvalidConfigurationError,
    PartTooLargeError,
    SheetCapacityError,
)


@pytest.fixture
def command() -> PackCutListCommand:
    return PackCutListCommand()


class TestPackCutListCommand:
    """Tests for the pack use case."""

    def test_packs_fixture(self, command: PackCutListCommand, fixtures_path: Path) -> None:
        result = command.execute(load_config(fixtures_path / "six_panels.json"))

        assert result.success
        assert result.total_sheets == 1
        assert result.total_pieces_placed == 6

    def test_variants_can_be_disabled(self, command: PackCutListCommand) -> None:
        job = load_config_from_dict(
            {
                "version": "1.0",
                "parts": [{"id": "panel", "width": 900, "height": 600, "quantity": 6}],
                "packing": {"variants": False},
            }
        )
        result = command.execute(job)

        assert result.variant == "configured"
        assert result.total_sheets == 2

    def test_optimize_override(self, command: PackCutListCommand, fixtures_path: Path) -> None:
        job = load_config(fixtures_path / "kitchen.json")
        baseline = command.execute(job)
        optimized = command.execute(job, optimize=True, seed=3)

        assert optimized.success
        assert optimized.total_sheets <= baseline.total_sheets
        assert optimized.total_pieces_placed == baseline.total_pieces_placed

    def test_failure_is_returned(self, command: PackCutListCommand, fixtures_path: Path) -> None:
        result = command.execute(load_config(fixtures_path / "oversized.json"))

        assert not result.success
        assert isinstance(result.error, PartTooLargeError)
        assert result.unplaced[0].part_id == "big"

    def test_rejected_settings_list_every_part(self, command: PackCutListCommand) -> None:
        job = load_config_from_dict(
            {
                "version": "1.0",
                "parts": [
                    {"id": "panel", "width": 900, "height": 600, "quantity": 6},
                    {"id": "rail", "width": 764, "height": 100},
                ],
            }
        )

        result = command.execute(job, optimize=True, time_budget=-1)

        assert isinstance(result.error, InvalidConfigurationError)
        assert [(u.part_id, u.count, u.reason) for u in result.unplaced] == [
            ("panel", 6, "invalid_configuration"),
            ("rail", 1, "invalid_configuration"),
        ]

    def test_sheet_limit_from_job(self, command: PackCutListCommand) -> None:
        job = load_config_from_dict(
            {
                "version": "1.0",
                "parts": [{"id": "carcass", "width": 2000, "height": 1500, "quantity": 2}],
                "packing": {"max_sheets": 1},
            }
        )

        result = command.execute(job)

        assert isinstance(result.error, SheetCapacityError)
        assert result.unplaced[0].reason == "insufficient_sheet_capacity"

    def test_shelf_engine_from_job(self, command: PackCutListCommand) -> None:
        job = load_config_from_dict(
            {
                "version": "1.0",
                "parts": [{"id": "panel", "width": 900, "height": 600, "quantity": 6}],
                "packing": {"algorithm": "shelf", "variants": False},
            }
        )

        result = command.execute(job)

        assert result.variant == "configured"
        assert result.total_sheets == 1
