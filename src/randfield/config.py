"""Configuration system for randfield.

Uses pydantic-settings for declarative, layered configuration:
init kwargs -> environment variables (RF_*) -> .env file -> field defaults.

Instances are frozen. Overrides from a persisted form are applied via
resolve_config(), which creates a new validated instance without mutating
the defaults.
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from randfield.exceptions import ConfigValidationError
from randfield.records.types import FieldType
from randfield.sampling.types import Distribution
from randfield.source.numpy_source import BIT_GENERATORS

# All known config field names (populated after class definition).
_ALL_FIELDS: frozenset[str] = frozenset()


class RandomFieldConfig(BaseSettings):
    """Configuration for one random-field stage.

    Resolution order: init kwargs -> env vars (RF_*) -> .env file -> defaults.

    Fields are divided into three groups:
    - **Output**: type and name of the appended field.
    - **Distribution**: seed, distribution variant and its parameters. Only
      the parameters of the active variant are used; the others are still
      type-validated.
    - **Diagnostics**: per-record logging verbosity and in-memory capture.
    """

    model_config = SettingsConfigDict(
        env_prefix="RF_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # --- Output ---

    output_type: FieldType = Field(
        default=FieldType.FLOAT64,
        description="Numeric type of the output field",
    )
    output_field_name: str = Field(
        default="Random",
        min_length=1,
        description="Field name to use for the output field",
    )

    # --- Distribution ---

    seed: int = Field(
        default=0,
        ge=-(2**63),
        le=2**63 - 1,
        description="Seed for the random number generator (0 to use the shared default)",
    )
    distribution: Distribution = Field(
        default=Distribution.UNIFORM,
        description="Distribution for the random number",
    )
    minimum: float = Field(
        default=0.0,
        description="Minimum range value (for bounded distributions)",
    )
    maximum: float = Field(
        default=1.0,
        description="Maximum range value (for bounded distributions)",
    )
    average: float = Field(
        default=0.0,
        description="Mean for Normal, mu for LogNormal, mode for Triangular",
    )
    standard_deviation: float = Field(
        default=1.0,
        description="Standard deviation (sigma for LogNormal)",
    )
    bit_generator: str = Field(
        default="pcg64",
        description="numpy bit generator for seeded sources: 'pcg64', 'mt19937', 'philox', 'sfc64'",
    )

    # --- Diagnostics ---

    log_level: str = Field(
        default="none",
        description="Per-record logging verbosity: 'none', 'summary', 'full'",
    )
    diagnostic_mode: bool = Field(
        default=False,
        description="Store every per-record sample event in memory for analysis",
    )

    @field_validator("output_type")
    @classmethod
    def _check_numeric_output(cls, value: FieldType) -> FieldType:
        if not value.is_numeric:
            raise ValueError(f"output_type must be numeric, got {value.value!r}")
        return value

    @field_validator("bit_generator")
    @classmethod
    def _check_bit_generator(cls, value: str) -> str:
        if value not in BIT_GENERATORS:
            available = ", ".join(sorted(BIT_GENERATORS))
            raise ValueError(f"Unknown bit generator {value!r}. Available: {available}")
        return value


# Populate _ALL_FIELDS now that the class is defined.
_ALL_FIELDS = frozenset(RandomFieldConfig.model_fields.keys())


def resolve_config(
    defaults: RandomFieldConfig,
    overrides: dict[str, Any] | None,
) -> RandomFieldConfig:
    """Create a new config instance merging defaults with overrides.

    Args:
        defaults: The base configuration (usually loaded from environment).
        overrides: Field values keyed by field name, e.g. read from a
            persisted tool configuration.

    Returns:
        A new RandomFieldConfig with overrides applied, or *defaults* itself
        if there is nothing to apply.

    Raises:
        ConfigValidationError: If a key is unknown or a value fails
            validation.
    """
    if not overrides:
        return defaults

    unknown = sorted(key for key in overrides if key not in _ALL_FIELDS)
    if unknown:
        raise ConfigValidationError(f"Unknown config field(s): {', '.join(unknown)}")

    # model_copy(update=...) skips validation; model_validate runs it.
    merged = defaults.model_dump()
    merged.update(overrides)
    try:
        return RandomFieldConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigValidationError(str(exc)) from exc


def _format_number(value: float) -> str:
    """Render a float the way the label shows it.

    Up to 15 significant digits, integral values without a trailing ``.0``,
    and exponent notation below 1e-4 or from 1e15 (``1E-05``, ``1E+21``).
    Non-finite values render as ``NaN``, ``Infinity`` and ``-Infinity``.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value == 0:
        return "0"
    return f"{value:.15g}".replace("e", "E")


def describe_config(config: RandomFieldConfig) -> str:
    """Render *config* as a short annotation label.

    Examples: ``Random=Rand[0, 1]``, ``Random=Tri[0, 0.5, 1]``,
    ``Random=Normal[0, 1]``, ``Random=LogNormal[0, 1]``.

    Returns:
        The label, or an empty string for an unrecognised distribution.
    """
    name = config.output_field_name
    minimum = _format_number(config.minimum)
    maximum = _format_number(config.maximum)
    average = _format_number(config.average)
    std = _format_number(config.standard_deviation)

    if config.distribution is Distribution.UNIFORM:
        return f"{name}=Rand[{minimum}, {maximum}]"
    if config.distribution is Distribution.TRIANGULAR:
        return f"{name}=Tri[{minimum}, {average}, {maximum}]"
    if config.distribution in (Distribution.NORMAL, Distribution.LOGNORMAL):
        return f"{name}={config.distribution.label}[{average}, {std}]"
    return ""
