"""Engine configuration parsing and validation."""

import os
from dataclasses import dataclass, field, fields, asdict
from datetime import date, datetime
from pathlib import Path
from typing import Dict, Any, List, Optional

import yaml

from tablesift.core import constants
from tablesift.core.exceptions import (
    ConfigError,
    YAMLSizeError,
    ConfigValidationError
)


# Alias kept for symmetry with the size error
YAMLStructureError = ConfigValidationError

MAX_YAML_KEY_LENGTH = 1000


@dataclass(frozen=True)
class EngineConfig:
    """
    Thresholds, caps and defaults for one engine instance.

    Every field defaults to the matching value in core.constants. Results
    are deterministic for a given (dataset, config) pair; reference_date
    pins "today" for the date heuristics and fill_today.

    Example:
        >>> config = EngineConfig(reference_date=date(2024, 6, 1))
        >>> config.max_contextual_issues
        1000
    """
    type_sample_size: int = constants.TYPE_INFERENCE_SAMPLE_SIZE
    number_match_ratio: float = constants.NUMBER_MATCH_RATIO
    date_match_ratio: float = constants.DATE_MATCH_RATIO
    email_match_ratio: float = constants.EMAIL_MATCH_RATIO
    phone_match_ratio: float = constants.PHONE_MATCH_RATIO
    url_match_ratio: float = constants.URL_MATCH_RATIO

    outlier_z_threshold: float = constants.OUTLIER_Z_SCORE_THRESHOLD
    outlier_min_values: int = constants.MIN_VALUES_FOR_OUTLIERS
    max_outliers_per_column: int = constants.MAX_OUTLIERS_PER_COLUMN

    max_contextual_issues: int = constants.MAX_CONTEXTUAL_ISSUES
    max_cross_field_issues: int = constants.MAX_CROSS_FIELD_ISSUES
    max_affected_rows: int = constants.MAX_AFFECTED_ROWS

    batch_size: int = constants.DEFAULT_BATCH_SIZE
    reference_date: Optional[date] = None

    duplicate_flag_column: str = constants.DUPLICATE_FLAG_COLUMN
    issue_flag_column: str = constants.ISSUE_FLAG_COLUMN

    def __post_init__(self):
        for name in ("type_sample_size", "outlier_min_values", "max_outliers_per_column",
                     "max_contextual_issues", "max_cross_field_issues", "max_affected_rows",
                     "batch_size"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise ConfigValidationError(
                    f"'{name}' must be a positive integer",
                    field=name,
                    expected="positive integer",
                    actual=repr(value)
                )
        for name in ("number_match_ratio", "date_match_ratio", "email_match_ratio",
                     "phone_match_ratio", "url_match_ratio"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)) or not 0 < value <= 1:
                raise ConfigValidationError(
                    f"'{name}' must be a number in (0, 1]",
                    field=name,
                    expected="number in (0, 1]",
                    actual=repr(value)
                )
        if isinstance(self.outlier_z_threshold, bool) or not isinstance(self.outlier_z_threshold, (int, float)) \
                or self.outlier_z_threshold <= 0:
            raise ConfigValidationError(
                "'outlier_z_threshold' must be a positive number",
                field="outlier_z_threshold",
                expected="positive number",
                actual=repr(self.outlier_z_threshold)
            )
        if isinstance(self.reference_date, datetime):
            object.__setattr__(self, 'reference_date', self.reference_date.date())
        elif self.reference_date is not None and not isinstance(self.reference_date, date):
            raise ConfigValidationError(
                "'reference_date' must be a date (YYYY-MM-DD)",
                field="reference_date",
                expected="YYYY-MM-DD",
                actual=repr(self.reference_date)
            )

    def today(self) -> date:
        """The reference date, or the current date when none is pinned."""
        return self.reference_date or date.today()

    def now(self) -> datetime:
        """The reference moment used for "future" checks."""
        if self.reference_date is not None:
            return datetime(self.reference_date.year, self.reference_date.month, self.reference_date.day)
        return datetime.now()

    @classmethod
    def from_dict(cls, config_dict: Optional[Dict[str, Any]]) -> "EngineConfig":
        """
        Build a config from a plain dictionary (for example the 'engine'
        section of a YAML file).

        Raises:
            ConfigValidationError: On unknown keys or invalid values
        """
        config_dict = dict(config_dict or {})
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(config_dict) - known)
        if unknown:
            raise ConfigValidationError(
                f"Unknown engine setting(s): {', '.join(unknown)}",
                field=unknown[0],
                expected=", ".join(sorted(known)),
                actual=", ".join(unknown)
            )

        reference = config_dict.get("reference_date")
        if isinstance(reference, str):
            try:
                config_dict["reference_date"] = date.fromisoformat(reference)
            except ValueError:
                raise ConfigValidationError(
                    f"Invalid reference_date: '{reference}'",
                    field="reference_date",
                    expected="YYYY-MM-DD",
                    actual=reference
                )

        return cls(**config_dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        result = asdict(self)
        if self.reference_date is not None:
            result["reference_date"] = self.reference_date.isoformat()
        return result


@dataclass
class ProjectConfig:
    """
    Contents of a TableSift YAML file: engine settings plus custom rules.

    YAML layout:

        engine:
          max_contextual_issues: 500
          reference_date: 2024-06-01
        rules:
          - id: age_range
            name: Age must be realistic
            condition: "age > 120"
            severity: high
            columns: [age]
    """
    engine: EngineConfig = field(default_factory=EngineConfig)
    rules: List[Dict[str, Any]] = field(default_factory=list)
    source_path: Optional[str] = None

    MAX_YAML_FILE_SIZE = constants.MAX_YAML_FILE_SIZE
    MAX_YAML_NESTING_DEPTH = constants.MAX_YAML_NESTING_DEPTH
    MAX_YAML_KEYS = constants.MAX_YAML_KEY_COUNT

    @classmethod
    def from_yaml(cls, config_path: str) -> "ProjectConfig":
        """
        Load configuration from YAML file with security validations.

        Security protections:
        - File size limit: 10 MB
        - Nesting depth limit: 20 levels
        - Total keys limit: 10,000 keys

        Raises:
            ConfigError: If file not found or invalid
            YAMLSizeError: If file exceeds size limit
            YAMLStructureError: If YAML structure is too complex
        """
        config_file = Path(config_path)
        if not config_file.exists():
            raise ConfigError(f"Configuration file not found: {config_path}")

        file_size = os.path.getsize(config_file)
        if file_size > cls.MAX_YAML_FILE_SIZE:
            raise YAMLSizeError(
                f"Configuration file too large: {file_size:,} bytes. "
                f"Maximum allowed: {cls.MAX_YAML_FILE_SIZE:,} bytes ({cls.MAX_YAML_FILE_SIZE // (1024*1024)} MB)",
                file_size=file_size,
                max_size=cls.MAX_YAML_FILE_SIZE
            )

        try:
            with open(config_file, "r", encoding="utf-8") as f:
                config_dict = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse YAML file: {str(e)}")
        except UnicodeDecodeError as e:
            raise ConfigError(f"Invalid file encoding (expected UTF-8): {str(e)}")

        if config_dict is not None:
            cls._validate_yaml_structure(config_dict)

        config = cls.from_dict(config_dict or {})
        config.source_path = str(config_file)
        return config

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "ProjectConfig":
        """Build from an already-parsed dictionary."""
        if not isinstance(config_dict, dict):
            raise ConfigValidationError(
                "Configuration root must be a mapping",
                expected="mapping",
                actual=type(config_dict).__name__
            )

        unknown = sorted(set(config_dict) - {"engine", "rules"})
        if unknown:
            raise ConfigValidationError(
                f"Unknown top-level key(s): {', '.join(unknown)}",
                field=unknown[0],
                expected="engine, rules",
                actual=", ".join(unknown)
            )

        engine_section = config_dict.get("engine") or {}
        if not isinstance(engine_section, dict):
            raise ConfigValidationError("'engine' must be a mapping", field="engine")

        rules = config_dict.get("rules") or []
        if not isinstance(rules, list) or not all(isinstance(r, dict) for r in rules):
            raise ConfigValidationError("'rules' must be a list of mappings", field="rules")

        return cls(engine=EngineConfig.from_dict(engine_section), rules=rules)

    @classmethod
    def _validate_yaml_structure(cls, obj: Any, current_depth: int = 0, total_keys: List[int] = None) -> None:
        """
        Validate YAML structure to prevent resource exhaustion.

        Checks for excessive nesting depth and too many keys/items.

        Raises:
            YAMLStructureError: If structure is too complex
        """
        if total_keys is None:
            total_keys = [0]

        if current_depth > cls.MAX_YAML_NESTING_DEPTH:
            raise YAMLStructureError(
                f"YAML nesting depth exceeds maximum of {cls.MAX_YAML_NESTING_DEPTH} levels."
            )

        if isinstance(obj, dict):
            total_keys[0] += len(obj)
            if total_keys[0] > cls.MAX_YAML_KEYS:
                raise YAMLStructureError(
                    f"YAML structure contains more than {cls.MAX_YAML_KEYS:,} keys/items."
                )
            for key, value in obj.items():
                if isinstance(key, str) and len(key) > MAX_YAML_KEY_LENGTH:
                    raise YAMLStructureError(
                        f"YAML key exceeds maximum length of {MAX_YAML_KEY_LENGTH} characters: '{key[:50]}...'"
                    )
                cls._validate_yaml_structure(value, current_depth + 1, total_keys)

        elif isinstance(obj, list):
            total_keys[0] += len(obj)
            if total_keys[0] > cls.MAX_YAML_KEYS:
                raise YAMLStructureError(
                    f"YAML structure contains more than {cls.MAX_YAML_KEYS:,} keys/items."
                )
            for item in obj:
                cls._validate_yaml_structure(item, current_depth + 1, total_keys)
