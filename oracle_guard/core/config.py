"""
Application configuration for the oracle submission validator.

Provides environment-aware settings with conservative defaults. All anomaly
and verdict thresholds are configurable to avoid hard-coded "magic numbers".
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError

SEVEN_DAYS_MS = 7 * 24 * 60 * 60 * 1000


class AnomalyConfig(BaseModel):
	"""
	Thresholds for the statistical anomaly detector.

	Rationale:
	- A 3-sigma outlier rule keeps noisy but honest feeds from being flagged.
	- Sudden-change thresholds are percentages, compared against the most
	  recent accepted value of the same asset or metric.
	- asset_thresholds overrides the sudden-change threshold per asset symbol.
	  It does not affect the outlier rule.
	"""

	model_config = ConfigDict(frozen=True, extra="forbid")

	std_dev_threshold: float = Field(3.0, gt=0.0, description="Z-score above which a price is an outlier")
	sudden_change_threshold: float = Field(
		20.0, gt=0.0, description="Default percent change treated as sudden"
	)
	asset_thresholds: Dict[str, float] = Field(
		default_factory=dict, description="Per-asset percent change overrides (e.g. {'BTC': 15})"
	)
	min_data_points: int = Field(5, ge=1, description="History points required before detection")
	outlier_min_points: int = Field(5, ge=1, description="History points required for the z-score rule")
	max_data_age_ms: int = Field(SEVEN_DAYS_MS, gt=0, description="Oldest history considered, in ms")

	@field_validator("asset_thresholds")
	@classmethod
	def _positive_overrides(cls, value: Dict[str, float]) -> Dict[str, float]:
		for asset, threshold in value.items():
			if threshold <= 0:
				raise ValueError(f"Threshold for {asset} must be positive, got {threshold}")
		return value

	def threshold_for(self, asset: str) -> float:
		return self.asset_thresholds.get(asset, self.sudden_change_threshold)


class DecisionConfig(BaseModel):
	"""
	Configuration for the reasoning engine.

	Notes:
	- confidence_threshold: minimum confidence for a VALID verdict.
	- invalid_threshold: confidence at or below which the verdict is INVALID.
	- reasoning_steps: how many of the ordered checks run (structure,
	  anomaly cross-check, consistency).
	- max_retries: how often a caller may re-queue an UNCERTAIN submission.
	  The engine itself never retries.
	"""

	model_config = ConfigDict(frozen=True, extra="forbid")

	confidence_threshold: float = Field(0.75, ge=0.0, le=1.0)
	invalid_threshold: float = Field(0.3, ge=0.0, le=1.0)
	reasoning_steps: int = Field(3, ge=1, le=3)
	max_retries: int = Field(2, ge=0)
	cross_check_threshold: float = Field(20.0, gt=0.0)
	max_data_age_ms: int = Field(SEVEN_DAYS_MS, gt=0)

	@model_validator(mode="after")
	def _ordered_thresholds(self) -> "DecisionConfig":
		if self.invalid_threshold >= self.confidence_threshold:
			raise ValueError(
				"invalid_threshold must be lower than confidence_threshold "
				f"({self.invalid_threshold} >= {self.confidence_threshold})"
			)
		return self


class OracleGuardConfig(BaseSettings):
	"""
	Global configuration with environment overrides.

	Nested values can be set with a double underscore, for example
	ORACLE_GUARD_ANOMALY__MIN_DATA_POINTS=10.
	"""

	model_config = SettingsConfigDict(
		env_prefix="ORACLE_GUARD_",
		env_nested_delimiter="__",
		env_file=".env",
		extra="ignore",
	)

	log_level: str = Field("INFO", description="Default logging level")
	logs_dir: Path = Field(Path("logs"), description="Directory for log files")
	anomaly: AnomalyConfig = AnomalyConfig()
	decision: DecisionConfig = DecisionConfig()

	def model_post_init(self, __context: object) -> None:
		self.logs_dir.mkdir(parents=True, exist_ok=True)


def build_model(model_cls: type, overrides: Dict[str, Any]) -> Any:
	"""Instantiate a config model, converting validation failures to ConfigurationError."""
	try:
		return model_cls(**overrides)
	except ValidationError as e:
		raise ConfigurationError(f"Invalid {model_cls.__name__}: {e}") from e


def build_config(**overrides: Any) -> OracleGuardConfig:
	"""
	Build a validated configuration.

	Raises:
		ConfigurationError: If any threshold is out of range.
	"""
	return build_model(OracleGuardConfig, overrides)


config = build_config()
