"""Tests for domain value objects and the error taxonomy."""

from __future__ import annotations

import pickle

import pytest

from panelcut.domain.exceptions import (
    AlgorithmInvariantViolation,
    InvalidConfigurationError,
    PackingError,
    PartTooLargeError,
    SheetCapacityError,
)
from panelcut.domain.value_objects import (
    FreeRegion,
    Grain,
    Offcut,
    Orientation,
    Part,
    PartInstance,
    Placement,
    ScoringWeights,
    StockSheet,
    WasteScoringConfig,
)


class TestStockSheet:
    """Tests for StockSheet."""

    def test_defaults(self) -> None:
        stock = StockSheet()
        assert stock.width == 2700
        assert stock.height == 1800
        assert stock.area == 4_860_000

    @pytest.mark.parametrize("width,height", [(0, 1800), (2700, -1)])
    def test_rejects_non_positive_dimensions(self, width: float, height: float) -> None:
        with pytest.raises(InvalidConfigurationError):
            StockSheet(width=width, height=height)


class TestPart:
    """Tests for Part validation and grain coercion."""

    def test_grain_string_is_coerced(self) -> None:
        part = Part(id="a", width=100, height=200, grain="lengthwise")
        assert part.grain is Grain.LENGTHWISE

    def test_unknown_grain_raises(self) -> None:
        with pytest.raises(InvalidConfigurationError, match="grain"):
            Part(id="a", width=100, height=200, grain="diagonal")

    def test_invalid_configuration_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            Part(id="a", width=0, height=200)

    def test_quantity_must_be_positive(self) -> None:
        with pytest.raises(InvalidConfigurationError):
            Part(id="a", width=100, height=200, quantity=0)

    def test_empty_id_rejected(self) -> None:
        with pytest.raises(InvalidConfigurationError):
            Part(id="", width=100, height=200)


class TestPartInstance:
    def test_key_and_constraint(self) -> None:
        part = Part(id="side", width=560, height=720)
        single = PartInstance(part, 2, (Orientation(560, 720),))
        both = PartInstance(part, 1, (Orientation(560, 720), Orientation(720, 560, True)))

        assert single.key == "side#2"
        assert single.is_constrained
        assert not both.is_constrained
        assert both.area == 560 * 720


class TestFreeRegion:
    """Tests for FreeRegion geometry helpers."""

    def test_can_contain_exact_fit(self) -> None:
        region = FreeRegion(0, 0, 900, 600)
        assert region.can_contain(900, 600)
        assert not region.can_contain(900.5, 600)

    def test_touching_regions_do_not_overlap(self) -> None:
        a = FreeRegion(0, 0, 100, 100)
        b = FreeRegion(100, 0, 100, 100)
        assert not a.overlaps(b)
        assert a.overlaps(FreeRegion(99, 99, 10, 10))

    def test_aspect_ratio(self) -> None:
        assert FreeRegion(0, 0, 400, 200).aspect_ratio == 0.5
        assert FreeRegion(0, 0, 300, 300).aspect_ratio == 1.0

    def test_contains_region(self) -> None:
        sheet = FreeRegion(0, 0, 1000, 1000)
        assert sheet.contains_region(FreeRegion(500, 500, 500, 500))
        assert not sheet.contains_region(FreeRegion(600, 0, 500, 100))


class TestPlacement:
    def test_bounds_follow_orientation(self) -> None:
        placement = Placement("door", 1, 10, 20, Orientation(715, 397, True), 0)
        assert placement.rotated
        bounds = placement.bounds
        assert (bounds.x, bounds.y, bounds.width, bounds.height) == (10, 20, 715, 397)

    def test_negative_position_rejected(self) -> None:
        with pytest.raises(ValueError):
            Placement("door", 1, -5, 0, Orientation(100, 100), 0)


class TestOffcut:
    def test_rejects_zero_size(self) -> None:
        with pytest.raises(ValueError):
            Offcut(0, 0, 0, 100, sheet_index=0, usable=False)


class TestScoringConfigs:
    def test_weight_defaults(self) -> None:
        weights = ScoringWeights()
        assert (weights.fit, weights.waste, weights.guillotine) == (0.3, 0.5, 0.2)

    def test_all_zero_weights_rejected(self) -> None:
        with pytest.raises(InvalidConfigurationError):
            ScoringWeights(fit=0, waste=0, guillotine=0)

    def test_fragmentation_cap_must_be_below_one(self) -> None:
        with pytest.raises(InvalidConfigurationError):
            WasteScoringConfig(fragmentation_cap=1.0)


class TestExceptions:
    """Errors must survive pickling for worker processes."""

    def test_hierarchy(self) -> None:
        assert issubclass(PartTooLargeError, PackingError)
        assert issubclass(InvalidConfigurationError, PackingError)
        assert issubclass(AlgorithmInvariantViolation, PackingError)

    def test_part_too_large_default_message(self) -> None:
        error = PartTooLargeError(["a", "b"])
        assert error.part_ids == ("a", "b")
        assert "a, b" in str(error)
        assert error.error_type == "part_too_large"

    def test_pickle_keeps_attributes(self) -> None:
        error = pickle.loads(pickle.dumps(AlgorithmInvariantViolation("overlap", 3)))
        assert isinstance(error, AlgorithmInvariantViolation)
        assert error.sheet_index == 3
        assert error.message == "overlap"

        error = pickle.loads(pickle.dumps(PartTooLargeError(["big"], "too big")))
        assert error.part_ids == ("big",)
        assert error.message == "too big"

    def test_sheet_capacity_error(self) -> None:
        error = pickle.loads(pickle.dumps(SheetCapacityError({"door": 2, "rail": 1}, 1)))

        assert error.part_ids == ("door", "rail")
        assert error.max_sheets == 1
        assert error.message == "3 piece(s) do not fit on 1 sheet(s): door, rail"
        assert error.error_type == "insufficient_sheet_capacity"
