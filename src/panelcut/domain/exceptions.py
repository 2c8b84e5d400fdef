"""Error taxonomy for sheet packing.

Every error raised by the packing core derives from PackingError so that
the service boundary can catch a single type and return it inside a
PackingResult instead of letting it escape.
"""

from __future__ import annotations

from typing import Mapping, Sequence


class PackingError(Exception):
    """Base class for all packing failures.

    Attributes:
        message: Human-readable description of the failure.
        error_type: Short machine-readable category.
    """

    error_type = "packing_error"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return self.message

    def __reduce__(self):
        return (self.__class__, (self.message,))


class PartTooLargeError(PackingError):
    """Raised when no legal orientation of a part fits the stock sheet.

    Attributes:
        part_ids: Ids of every part that cannot be cut from the stock.
    """

    error_type = "part_too_large"

    def __init__(self, part_ids: Sequence[str], message: str | None = None) -> None:
        self.part_ids: tuple[str, ...] = tuple(part_ids)
        if message is None:
            message = (
                "Part(s) too large for stock sheet in every legal orientation: "
                + ", ".join(self.part_ids)
            )
        super().__init__(message)

    def __reduce__(self):
        return (self.__class__, (self.part_ids, self.message))


class InvalidConfigurationError(PackingError, ValueError):
    """Raised before any placement when inputs or settings are invalid.

    Attributes:
        field: Name of the offending setting or input field, if known.
    """

    error_type = "invalid_configuration"

    def __init__(self, message: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)

    def __reduce__(self):
        return (self.__class__, (self.message, self.field))


class AlgorithmInvariantViolation(PackingError):
    """Raised when an internal consistency check fails.

    Overlapping placements or an illegal split mean the layout cannot be
    cut on a panel saw, so the run is aborted rather than repaired.

    Attributes:
        sheet_index: Sheet on which the violation was detected, if known.
    """

    error_type = "invariant_violation"

    def __init__(self, message: str, sheet_index: int | None = None) -> None:
        self.sheet_index = sheet_index
        super().__init__(message)

    def __reduce__(self):
        return (self.__class__, (self.message, self.sheet_index))


class SheetCapacityError(PackingError):
    """Raised when a run needs more sheets than its configured limit.

    Attributes:
        part_counts: Pieces left unplaced per part id, in placement order.
        max_sheets: The sheet limit that was reached.
    """

    error_type = "insufficient_sheet_capacity"

    def __init__(self, part_counts: Mapping[str, int], max_sheets: int) -> None:
        self.part_counts: dict[str, int] = dict(part_counts)
        self.max_sheets = max_sheets
        pieces = sum(self.part_counts.values())
        super().__init__(
            f"{pieces} piece(s) do not fit on {max_sheets} sheet(s): "
            + ", ".join(self.part_counts)
        )

    @property
    def part_ids(self) -> tuple[str, ...]:
        return tuple(self.part_counts)

    def __reduce__(self):
        return (self.__class__, (self.part_counts, self.max_sheets))
