"""Job file schema, loading and conversion.

Public API:
    - PackingJobSchema: Root job model
    - load_config: Load a job from a JSON file
    - load_config_from_dict: Load a job from a dictionary
    - ConfigError: Exception for job file errors
    - describe_location: Label of a validation detail, naming the part
    - config_to_stock, config_to_parts, config_to_packing,
      config_to_annealing: Convert schemas to domain objects

Example:
    >>> from pathlib import Path
    >>> from panelcut.application.config import load_config, ConfigError
    >>>
    >>> try:
    ...     job = load_config(Path("kitchen.json"))
    ...     print(f"{len(job.parts)} parts on {job.stock.width}x{job.stock.height}")
    ... except ConfigError as e:
    ...     print(f"Error: {e}")
"""

from panelcut.application.config.adapter import (
    config_to_annealing,
    config_to_packing,
    config_to_parts,
    config_to_stock,
)
from panelcut.application.config.loader import (
    ConfigError,
    describe_location,
    load_config,
    load_config_from_dict,
)
from panelcut.application.config.schema import (
    SUPPORTED_VERSIONS,
    OptimizeConfigSchema,
    PackingConfigSchema,
    PackingJobSchema,
    PartSchema,
    ScoringWeightsSchema,
    StockSchema,
    WasteScoringSchema,
)

__all__ = [
    "SUPPORTED_VERSIONS",
    "ConfigError",
    "OptimizeConfigSchema",
    "PackingConfigSchema",
    "PackingJobSchema",
    "PartSchema",
    "ScoringWeightsSchema",
    "StockSchema",
    "WasteScoringSchema",
    "config_to_annealing",
    "config_to_packing",
    "config_to_parts",
    "config_to_stock",
    "describe_location",
    "load_config",
    "load_config_from_dict",
]
