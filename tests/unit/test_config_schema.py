"""Tests for the job schema, loader and adapters."""

from __future__ import annotations

from pathlib import Path

import pytest

from panelcut.application.config import (
    ConfigError,
    PackingJobSchema,
    config_to_annealing,
    config_to_packing,
    config_to_parts,
    config_to_stock,
    describe_location,
    load_config,
    load_config_from_dict,
)
from panelcut.application.config.loader import _format_json_path
from panelcut.domain.exceptions import InvalidConfigurationError
from panelcut.domain.services import OrderingStrategy
from panelcut.domain.value_objects import Grain, SplitAxis


def _job(**overrides) -> dict:
    data = {
        "version": "1.0",
        "parts": [{"id": "shelf", "width": 800, "height": 300, "quantity": 2}],
    }
    data.update(overrides)
    return data


# =============================================================================
# Schema
# =============================================================================


class TestPackingJobSchema:
    """Tests for PackingJobSchema validation."""

    def test_minimal_job_uses_defaults(self) -> None:
        job = load_config_from_dict(_job())

        assert job.stock.width == 2700
        assert job.stock.height == 1800
        assert job.packing.kerf == 4.0
        assert job.packing.split_axis is SplitAxis.SHORTER
        assert job.optimize.enabled is False
        assert job.parts[0].grain is Grain.ANY

    def test_newer_minor_version_accepted(self) -> None:
        assert load_config_from_dict(_job(version="1.3")).version == "1.3"

    def test_unsupported_major_version_rejected(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_config_from_dict(_job(version="2.0"))
        assert exc_info.value.details[0]["path"] == "version"

    def test_unknown_field_rejected(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_config_from_dict(_job(colour="oak"))
        assert exc_info.value.error_type == "validation"

    def test_invalid_grain_reports_json_path(self) -> None:
        data = _job(parts=[{"id": "a", "width": 1, "height": 1, "grain": "diagonal"}])
        with pytest.raises(ConfigError) as exc_info:
            load_config_from_dict(data)

        paths = [d["path"] for d in exc_info.value.details]
        assert paths == ["parts[0].grain"]
        assert "parts[0].grain" in exc_info.value.message

    def test_part_errors_name_the_part(self) -> None:
        data = _job(
            parts=[
                {"id": "side", "width": 560, "height": 720},
                {"id": "door", "width": -1, "height": 715, "grain": "diagonal"},
            ]
        )
        with pytest.raises(ConfigError) as exc_info:
            load_config_from_dict(data)

        details = exc_info.value.details
        assert {d["field"] for d in details} == {"width", "grain"}
        assert {(d["part_index"], d["part_id"]) for d in details} == {(1, "door")}
        assert describe_location(details[0]) == "part 'door' (parts[1])"
        assert "(part 'door')" in exc_info.value.message

    def test_part_without_id_is_located_by_position(self) -> None:
        data = _job(parts=[{"width": 100, "height": 100}])
        with pytest.raises(ConfigError) as exc_info:
            load_config_from_dict(data)

        detail = exc_info.value.details[0]
        assert detail["part_id"] is None
        assert describe_location(detail) == "part #1 (parts[0])"

    def test_job_level_errors_have_no_part(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_config_from_dict(_job(packing={"kerf": -2}))

        detail = exc_info.value.details[0]
        assert "part_index" not in detail
        assert describe_location(detail) == "packing.kerf"

    def test_rejection_maps_to_invalid_configuration(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_config_from_dict(_job(packing={"max_sheets": 0}))

        error = exc_info.value.as_packing_error()
        assert isinstance(error, InvalidConfigurationError)
        assert error.error_type == "invalid_configuration"
        assert error.field == "packing.max_sheets"

    def test_duplicate_part_ids_rejected(self) -> None:
        data = _job(
            parts=[
                {"id": "a", "width": 100, "height": 100},
                {"id": "a", "width": 200, "height": 100},
            ]
        )
        with pytest.raises(ConfigError, match="Duplicate part id"):
            load_config_from_dict(data)

    def test_non_positive_dimensions_rejected(self) -> None:
        with pytest.raises(ConfigError):
            load_config_from_dict(_job(stock={"width": 0, "height": 1800}))

    def test_all_zero_weights_rejected(self) -> None:
        packing = {"scoring_weights": {"fit": 0, "waste": 0, "guillotine": 0}}
        with pytest.raises(ConfigError, match="scoring weight"):
            load_config_from_dict(_job(packing=packing))


class TestFormatJsonPath:
    def test_nested_path(self) -> None:
        assert _format_json_path(("parts", 2, "width")) == "parts[2].width"

    def test_leading_index(self) -> None:
        assert _format_json_path((0, "id")) == "[0].id"


# =============================================================================
# Loader
# =============================================================================


class TestLoadConfig:
    """Tests for load_config file handling."""

    def test_loads_fixture(self, fixtures_path: Path) -> None:
        job = load_config(fixtures_path / "kitchen.json")
        assert isinstance(job, PackingJobSchema)
        assert len(job.parts) == 5
        assert job.packing.kerf == 3.2

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path / "missing.json")
        assert exc_info.value.error_type == "file_not_found"

    def test_malformed_json(self, fixtures_path: Path) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_config(fixtures_path / "malformed.json")

        error = exc_info.value
        assert error.error_type == "json_parse"
        assert error.details[0]["line"] == 4

    def test_validation_error_keeps_path(self, fixtures_path: Path) -> None:
        path = fixtures_path / "invalid_grain.json"
        with pytest.raises(ConfigError) as exc_info:
            load_config(path)
        assert exc_info.value.path == path


# =============================================================================
# Adapters
# =============================================================================


class TestAdapters:
    """Tests for schema to domain conversion."""

    def test_stock_and_parts(self, fixtures_path: Path) -> None:
        job = load_config(fixtures_path / "kitchen.json")

        stock = config_to_stock(job.stock)
        parts = config_to_parts(job)

        assert (stock.width, stock.height) == (2700, 1800)
        assert [p.id for p in parts] == ["side", "shelf", "door", "top", "rail"]
        assert parts[0].grain is Grain.LENGTHWISE
        assert parts[0].label == "Carcass side"
        assert parts[3].grain is Grain.WIDTHWISE

    def test_packing_config(self) -> None:
        packing = {
            "kerf": 2.5,
            "split_axis": "longer",
            "ordering": "perimeter",
            "sliver_size": 80,
            "waste_scoring": {"usability_bonus": 1.5},
        }
        config = config_to_packing(load_config_from_dict(_job(packing=packing)).packing)

        assert config.kerf == 2.5
        assert config.split_axis is SplitAxis.LONGER
        assert config.ordering is OrderingStrategy.PERIMETER
        assert config.sliver_size == 80
        assert config.waste_scoring.usability_bonus == 1.5
        assert config.scoring_weights.waste == 0.5

    def test_engine_settings(self) -> None:
        packing = {"algorithm": "shelf", "max_sheets": 3}
        config = config_to_packing(load_config_from_dict(_job(packing=packing)).packing)

        assert config.algorithm.value == "shelf"
        assert config.max_sheets == 3

    def test_unknown_algorithm_rejected(self) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_config_from_dict(_job(packing={"algorithm": "maxrects"}))
        assert exc_info.value.details[0]["path"] == "packing.algorithm"

    def test_packing_config_default(self) -> None:
        assert config_to_packing(None).kerf == 4.0

    def test_annealing_disabled(self) -> None:
        job = load_config_from_dict(_job())
        assert config_to_annealing(job.optimize) is None

    def test_annealing_enabled(self) -> None:
        optimize = {"enabled": True, "time_budget": 2.0, "seed": 9}
        annealing = config_to_annealing(load_config_from_dict(_job(optimize=optimize)).optimize)

        assert annealing is not None
        assert annealing.time_budget == 2.0
        assert annealing.seed == 9
        assert annealing.max_iterations is None
