"""Pytest configuration and shared fixtures for panelcut tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from panelcut.domain.value_objects import Grain, Part, StockSheet
from panelcut.infrastructure.bin_packing import (
    GuillotineBinPacker,
    PackingConfig,
    SheetLayout,
)

FIXTURES_PATH = Path(__file__).parent / "fixtures" / "jobs"


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "slow: tests that take a long time to run")


# =============================================================================
# Shared fixtures
# =============================================================================


@pytest.fixture
def fixtures_path() -> Path:
    return FIXTURES_PATH


@pytest.fixture
def standard_stock() -> StockSheet:
    """Standard 2700x1800 mm board."""
    return StockSheet(width=2700, height=1800)


@pytest.fixture
def default_config() -> PackingConfig:
    return PackingConfig()


@pytest.fixture
def packer(default_config: PackingConfig) -> GuillotineBinPacker:
    """Create a packer with default configuration."""
    return GuillotineBinPacker(default_config)


@pytest.fixture
def six_panels() -> list[Part]:
    """Six 900x600 panels with no grain constraint."""
    return [Part(id=f"p{n}", width=900, height=600) for n in range(1, 7)]


@pytest.fixture
def mixed_parts() -> list[Part]:
    """A kitchen-sized cut list mixing grain constraints."""
    return [
        Part(id="side", width=560, height=720, grain=Grain.LENGTHWISE, quantity=4),
        Part(id="shelf", width=764, height=540, quantity=6),
        Part(id="door", width=397, height=715, grain=Grain.LENGTHWISE, quantity=4),
        Part(id="top", width=1200, height=560, grain=Grain.WIDTHWISE, quantity=2),
        Part(id="back", width=800, height=700, quantity=2),
        Part(id="rail", width=764, height=100, quantity=4),
        Part(id="block", width=300, height=300, quantity=3),
    ]


# =============================================================================
# Geometry helpers
# =============================================================================


def _rect(x: float, y: float, w: float, h: float) -> tuple[float, float, float, float]:
    return (round(x, 6), round(y, 6), round(w, 6), round(h, 6))


def replay_cuts(sheet: SheetLayout, kerf: float) -> set[tuple[float, float, float, float]]:
    """Replay a sheet's cut sequence from the full board.

    Every cut must divide a rectangle produced by the previous cuts edge to
    edge. Returns the final set of pieces.
    """
    pieces = {_rect(0, 0, sheet.stock.width, sheet.stock.height)}
    for cut in sheet.cuts:
        r = cut.region
        target = _rect(r.x, r.y, r.width, r.height)
        assert target in pieces, f"cut {cut} does not divide an existing piece"
        pieces.remove(target)

        if cut.axis.value == "horizontal":
            first = (r.x, r.y, r.width, cut.position - r.y)
            after = cut.position + kerf
            second = (r.x, after, r.width, r.bottom - after)
        else:
            first = (r.x, r.y, cut.position - r.x, r.height)
            after = cut.position + kerf
            second = (after, r.y, r.right - after, r.height)

        for x, y, w, h in (first, second):
            if w > 1e-9 and h > 1e-9:
                pieces.add(_rect(x, y, w, h))
    return pieces


def rect_of(item) -> tuple[float, float, float, float]:
    return _rect(item.x, item.y, item.width, item.height)


@pytest.fixture
def cut_replayer():
    """The replay_cuts helper."""
    return replay_cuts


@pytest.fixture
def as_rect():
    """The rect_of helper."""
    return rect_of
