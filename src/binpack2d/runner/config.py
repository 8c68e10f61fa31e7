"""Run configuration, loaded from YAML.

Example file::

    instances:
      - instance_id: 1
        box_length: 20
        num_rectangles: 10
        min_width: 2
        max_width: 10
        min_height: 3
        max_height: 15
        seed: 12345
    strategies: [area_desc, width_desc]
    local_search: true
    results_dir: results
    send_telegram: false
    log_level: INFO
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from binpack2d.algorithms.selection import get_selection_strategy
from binpack2d.core.errors import ConfigurationError, InvalidInputError


class InstanceConfig(BaseModel):
    """Parameters of one generated instance."""

    instance_id: int = Field(description="Instance identifier")
    box_length: int = Field(gt=0, description="Side of the square containers")
    num_rectangles: int = Field(gt=0, description="Number of rectangles to generate")
    min_width: int = Field(gt=0)
    max_width: int = Field(gt=0)
    min_height: int = Field(gt=0)
    max_height: int = Field(gt=0)
    seed: Optional[int] = Field(default=None, ge=0, description="Random seed; derived when omitted")


class RunConfig(BaseModel):
    """All tuneable parameters for an experiment run."""

    instances: list[InstanceConfig] = Field(min_length=1)
    strategies: list[str] = Field(default_factory=lambda: ["area_desc", "width_desc", "height_desc"])
    local_search: bool = True
    max_passes: Optional[int] = Field(default=None, gt=0)
    results_dir: str = "results"
    send_telegram: bool = False
    log_level: str = "INFO"

    @field_validator("strategies")
    @classmethod
    def _known_strategies(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("at least one strategy is required")
        try:
            names = [get_selection_strategy(name).value for name in value]
        except InvalidInputError as e:
            raise ValueError(str(e)) from e
        # length_desc folds into width_desc; keep the first occurrence only
        return list(dict.fromkeys(names))

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"unknown log level: {value}")
        return level


def parse_config(data: dict) -> RunConfig:
    """
    Validate a configuration mapping.

    Raises:
        ConfigurationError: If the mapping does not describe a valid run
    """
    try:
        return RunConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid run configuration:\n{e}") from e


def load_config(path: Path | str) -> RunConfig:
    """
    Load and validate a YAML run configuration.

    Raises:
        ConfigurationError: If the file is unreadable, not YAML, or invalid
    """
    path = Path(path)
    try:
        with path.open() as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Config file {path} is not valid YAML: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")
    return parse_config(data)
