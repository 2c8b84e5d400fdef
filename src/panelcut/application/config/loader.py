"""Job file loader.

Reads JSON packing jobs and validates them against PackingJobSchema.
Every failure is raised as ConfigError. Schema violations carry one
detail per offending field; a violation inside the part list also names
the part (its position and, when readable, its id) so that a long cut
list can be fixed without counting entries by hand.

ConfigError.as_packing_error() maps a rejected job onto the packing error
taxonomy, which lets callers report file problems and packing failures
through the same PackingResult.
"""

import json
from pathlib import Path
from typing import Any, Mapping

from pydantic import ValidationError as PydanticValidationError

from panelcut.application.config.schema import PackingJobSchema
from panelcut.domain.exceptions import InvalidConfigurationError


class ConfigError(Exception):
    """Exception raised for a job that cannot be loaded.

    Attributes:
        message: Human readable summary.
        error_type: file_not_found, file_read_error, json_parse or validation.
        path: Path to the job file, None for in-memory jobs.
        details: For json_parse, the line/column of the syntax error. For
            validation, one entry per violation with ``path``, ``field``,
            ``message``, ``value``, ``kind`` and, for part fields,
            ``part_index`` and ``part_id``.
    """

    def __init__(
        self,
        message: str,
        error_type: str = "unknown",
        path: Path | None = None,
        details: list[dict[str, Any]] | None = None,
    ) -> None:
        self.message = message
        self.error_type = error_type
        self.path = path
        self.details = details or []
        super().__init__(message)

    def __str__(self) -> str:
        return self.message

    def as_packing_error(self) -> InvalidConfigurationError:
        """The job rejection as an invalid_configuration packing error."""
        field = self.details[0].get("path") if self.error_type == "validation" else None
        return InvalidConfigurationError(self.message, field or None)


def _format_json_path(loc: tuple[str | int, ...]) -> str:
    """Format a Pydantic location tuple as a JSON path string.

    Examples:
        >>> _format_json_path(("stock", "width"))
        'stock.width'
        >>> _format_json_path(("parts", 0, "grain"))
        'parts[0].grain'
    """
    parts: list[str] = []
    for segment in loc:
        if isinstance(segment, int):
            if parts:
                parts[-1] = f"{parts[-1]}[{segment}]"
            else:
                parts.append(f"[{segment}]")
        else:
            parts.append(str(segment))
    return ".".join(parts)


def _raw_part_id(data: Any, index: int) -> str | None:
    """Id of parts[index] in the unvalidated job, if it has a usable one."""
    if not isinstance(data, Mapping):
        return None
    parts = data.get("parts")
    if not isinstance(parts, list) or not 0 <= index < len(parts):
        return None
    part = parts[index]
    part_id = part.get("id") if isinstance(part, Mapping) else None
    return part_id if isinstance(part_id, str) and part_id else None


def _issue(err: Mapping[str, Any], data: Any) -> dict[str, Any]:
    loc = tuple(err["loc"])
    detail: dict[str, Any] = {
        "path": _format_json_path(loc) or "job",
        "field": next((s for s in reversed(loc) if isinstance(s, str)), None),
        "message": err["msg"],
        "value": err.get("input"),
        "kind": err["type"],
    }
    if len(loc) >= 2 and loc[0] == "parts" and isinstance(loc[1], int):
        detail["part_index"] = loc[1]
        detail["part_id"] = _raw_part_id(data, loc[1])
    return detail


def _extract_validation_errors(
    error: PydanticValidationError,
    data: Any = None,
) -> list[dict[str, Any]]:
    """Flatten a Pydantic ValidationError into located detail dicts."""
    return [_issue(err, data) for err in error.errors()]


def describe_location(detail: Mapping[str, Any]) -> str:
    """Short label for where a violation sits, e.g. ``part 'a' (parts[0])``."""
    if "part_index" not in detail:
        return detail["path"]
    index = detail["part_index"]
    part_id = detail.get("part_id")
    if part_id:
        return f"part '{part_id}' (parts[{index}])"
    return f"part #{index + 1} (parts[{index}])"


def _format_validation_error_message(details: list[dict[str, Any]]) -> str:
    lines = ["Job validation failed:"]
    for detail in details:
        label = detail["path"]
        if detail.get("part_id"):
            label = f"{label} (part '{detail['part_id']}')"
        value = detail.get("value")
        if value is not None and not isinstance(value, (dict, list)):
            lines.append(f"  - {label}: {detail['message']} (got: {value!r})")
        else:
            lines.append(f"  - {label}: {detail['message']}")
    return "\n".join(lines)


def _validate(data: Any, path: Path | None = None) -> PackingJobSchema:
    try:
        return PackingJobSchema.model_validate(data)
    except PydanticValidationError as e:
        details = _extract_validation_errors(e, data)
        raise ConfigError(
            message=_format_validation_error_message(details),
            error_type="validation",
            path=path,
            details=details,
        ) from e


def load_config(path: Path) -> PackingJobSchema:
    """Load and validate a packing job from a JSON file.

    Args:
        path: Path to the JSON job file

    Returns:
        A validated PackingJobSchema instance

    Raises:
        ConfigError: If the file cannot be loaded or validated.
            The error_type attribute indicates the specific error category:
            - "file_not_found": File does not exist
            - "file_read_error": File could not be read
            - "json_parse": Invalid JSON syntax
            - "validation": Schema validation failed
    """
    if not path.exists():
        raise ConfigError(
            message=f"Job file not found: {path}",
            error_type="file_not_found",
            path=path,
        )

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(
            message=f"Error reading job file: {path}: {e}",
            error_type="file_read_error",
            path=path,
        ) from e

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigError(
            message=f"Invalid JSON in job file: {path} (line {e.lineno}, column {e.colno}): {e.msg}",
            error_type="json_parse",
            path=path,
            details=[{"line": e.lineno, "column": e.colno, "message": e.msg}],
        ) from e

    return _validate(data, path)


def load_config_from_dict(data: Mapping[str, Any]) -> PackingJobSchema:
    """Load and validate a packing job from a dictionary.

    Raises:
        ConfigError: If the data fails validation.
    """
    return _validate(data)
