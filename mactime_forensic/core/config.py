"""
Mactime Forensic - Run Configuration

Builds the options consumed by the timeline engine. Values are merged from,
lowest to highest precedence:

1. Built-in defaults
2. A YAML or JSON configuration file
3. Environment variables (MACTIME_FILTER, MACTIME_SORT)
4. Explicit overrides (command-line options)

Example configuration file (timeline.yaml):

    filter: 2021-01-01..2021-01-31
    sort: true
    date_format: "%Y-%m-%d %H:%M:%S"
    encoding: utf-8
"""

import codecs
import json
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from mactime_forensic.analysis.date_filter import DateFilter
from mactime_forensic.output.csv_export import DEFAULT_DATE_FORMAT
from mactime_forensic.utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


ENV_VAR_FILTER = "MACTIME_FILTER"
ENV_VAR_SORT = "MACTIME_SORT"

TRUE_VALUES = ("1", "true", "yes", "on")
FALSE_VALUES = ("0", "false", "no", "off", "")

# Keys accepted in configuration files
CONFIG_KEYS = ("filter", "sort", "date_format", "encoding")


class TimelineConfig(BaseModel):
    """Options controlling a single timeline run."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    date_filter: Optional[DateFilter] = Field(
        None, description="Inclusive UTC date range; None keeps every row"
    )
    sort: bool = Field(False, description="Sort rows by timestamp (stable)")
    date_format: str = Field(
        DEFAULT_DATE_FORMAT, description="strftime format for the CSV Date column"
    )
    encoding: str = Field("utf-8", description="Text encoding of the bodyfile")

    @field_validator("date_format")
    @classmethod
    def validate_date_format(cls, v: str) -> str:
        """Validate that the date format renders a non-empty string."""
        if not v or not datetime(2021, 1, 1).strftime(v):
            raise ValueError("date_format must produce a non-empty date string")
        return v

    @field_validator("encoding")
    @classmethod
    def validate_encoding(cls, v: str) -> str:
        """Validate that the encoding is known to Python."""
        try:
            codecs.lookup(v)
        except LookupError:
            raise ValueError(f"Unknown encoding: {v}")
        return v


def parse_bool(value: Any, source: str) -> bool:
    """Interpret a config or environment value as a boolean."""
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    raise ConfigurationError(
        f"Invalid boolean for {source}: {value!r}. "
        f"Use one of: {', '.join(TRUE_VALUES + FALSE_VALUES[:-1])}"
    )


def load_config_file(config_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load raw configuration values from a YAML or JSON file.

    Args:
        config_path: Path to a .yaml, .yml or .json file

    Returns:
        Dictionary of configuration values

    Raises:
        ConfigurationError: If the file is missing, unreadable or invalid
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigurationError("Config file not found", config_path=str(config_path))

    suffix = config_path.suffix.lower()

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            if suffix in [".yaml", ".yml"]:
                data = yaml.safe_load(f)
            elif suffix == ".json":
                data = json.load(f)
            else:
                raise ConfigurationError(
                    f"Unsupported format: {suffix}", config_path=str(config_path)
                )
    except (OSError, yaml.YAMLError, json.JSONDecodeError) as e:
        raise ConfigurationError(
            "Could not read config file", config_path=str(config_path), cause=e
        ) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            "Config file must contain a mapping", config_path=str(config_path)
        )

    unknown = sorted(set(data) - set(CONFIG_KEYS))
    if unknown:
        raise ConfigurationError(
            f"Unknown config keys: {', '.join(map(str, unknown))}",
            config_path=str(config_path),
        )

    logger.debug(f"Loaded configuration from {config_path}")
    return data


def load_config(
    config_path: Optional[Union[str, Path]] = None,
    date_filter: Optional[str] = None,
    sort: Optional[bool] = None,
    date_format: Optional[str] = None,
    encoding: Optional[str] = None,
) -> TimelineConfig:
    """
    Build a TimelineConfig from file, environment and explicit overrides.

    Arguments left as None do not override lower-precedence sources.

    Args:
        config_path: Optional YAML/JSON configuration file
        date_filter: Filter string such as '2021-01-01..2021-01-31'
        sort: Enable timestamp sorting
        date_format: strftime format for the Date column
        encoding: Bodyfile text encoding

    Returns:
        Validated TimelineConfig

    Raises:
        InvalidFilterSyntaxError: If a filter string is malformed
        ConfigurationError: If any other value is invalid
    """
    values: Dict[str, Any] = {}

    if config_path is not None:
        values.update(load_config_file(config_path))

    env_filter = os.environ.get(ENV_VAR_FILTER)
    if env_filter:
        values["filter"] = env_filter

    env_sort = os.environ.get(ENV_VAR_SORT)
    if env_sort is not None:
        values["sort"] = parse_bool(env_sort, ENV_VAR_SORT)

    overrides = {
        "filter": date_filter,
        "sort": sort,
        "date_format": date_format,
        "encoding": encoding,
    }
    values.update({k: v for k, v in overrides.items() if v is not None})

    filter_value = values.pop("filter", None)
    if filter_value is not None and filter_value != "":
        values["date_filter"] = DateFilter.parse(str(filter_value))

    if "sort" in values:
        values["sort"] = parse_bool(values["sort"], "sort")

    try:
        config = TimelineConfig(**values)
    except ValidationError as e:
        raise ConfigurationError("Invalid configuration values", cause=e) from e

    logger.debug(
        f"TimelineConfig: filter={config.date_filter}, sort={config.sort}, "
        f"date_format={config.date_format!r}, encoding={config.encoding}"
    )
    return config
