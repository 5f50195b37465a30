"""
TableSift Constants.

This module defines the thresholds, caps and defaults used throughout the
TableSift profiling and validation engine. Every value here can be overridden
through EngineConfig; the constants are the defaults.
"""

# ============================================================================
# Type Inference
# ============================================================================

# Number of non-null values sampled per column for type inference
TYPE_INFERENCE_SAMPLE_SIZE: int = 100

# Minimum share of the sample that must match for each type
NUMBER_MATCH_RATIO: float = 0.8
DATE_MATCH_RATIO: float = 0.7
EMAIL_MATCH_RATIO: float = 0.8
PHONE_MATCH_RATIO: float = 0.8
URL_MATCH_RATIO: float = 0.8

# Literal tokens accepted as booleans (in addition to real bool values)
BOOLEAN_TOKENS: frozenset = frozenset({"true", "false", "1", "0"})

# Column type tags
TYPE_BOOLEAN: str = "boolean"
TYPE_NUMBER: str = "number"
TYPE_DATE: str = "date"
TYPE_EMAIL: str = "email"
TYPE_PHONE: str = "phone"
TYPE_URL: str = "url"
TYPE_STRING: str = "string"
TYPE_UNKNOWN: str = "unknown"

COLUMN_TYPES: tuple = (
    TYPE_BOOLEAN,
    TYPE_NUMBER,
    TYPE_DATE,
    TYPE_EMAIL,
    TYPE_PHONE,
    TYPE_URL,
    TYPE_STRING,
    TYPE_UNKNOWN,
)


# ============================================================================
# Outlier Detection
# ============================================================================

# Absolute z-score above which a value is an outlier
OUTLIER_Z_SCORE_THRESHOLD: float = 2.5

# Minimum numeric values required before outliers are computed
MIN_VALUES_FOR_OUTLIERS: int = 4

# Maximum outliers reported per column
MAX_OUTLIERS_PER_COLUMN: int = 20


# ============================================================================
# Issue and Result Limits
# ============================================================================

MAX_CONTEXTUAL_ISSUES: int = 1_000
MAX_CROSS_FIELD_ISSUES: int = 500
MAX_AFFECTED_ROWS: int = 1_000


# ============================================================================
# Contextual Validation Limits
# ============================================================================

AGE_MEDIUM_LIMIT: float = 120
AGE_HIGH_LIMIT: float = 150
SALARY_HIGH_LIMIT: float = 10_000_000
PERCENTAGE_MIN: float = 0
PERCENTAGE_MAX: float = 100
EARLIEST_PLAUSIBLE_YEAR: int = 1900
FUTURE_YEARS_LIMIT: int = 10

# Cross-field heuristics
AGE_TOLERANCE_YEARS: int = 1
SENIOR_EXPERIENCE_YEARS: float = 10
LOW_SALARY_LIMIT: float = 30_000


# ============================================================================
# Quality Scoring
# ============================================================================

NULL_PENALTY_WEIGHT: float = 0.5
DUPLICATE_PENALTY_WEIGHT: float = 2.0
ISSUE_PENALTY_WEIGHT: float = 1.5
TYPE_DIVERSITY_BONUS: float = 5.0

# Bonus applies when more than this many distinct column types are present
TYPE_DIVERSITY_MIN_TYPES: int = 3


# ============================================================================
# Built-in Check Severity Thresholds
# ============================================================================

# Share of rows with nulls in a column above which the check is high / medium
NULL_HIGH_RATIO: float = 0.10
NULL_MEDIUM_RATIO: float = 0.05

# Share of duplicate rows above which the duplicate check is high
DUPLICATE_HIGH_RATIO: float = 0.05


# ============================================================================
# Fix Application
# ============================================================================

AGE_CAP_VALUE: int = 120
UNKNOWN_FILL_VALUE: str = "Unknown"
CLEANING_NULL_FILL_VALUE: str = "N/A"
DUPLICATE_FLAG_COLUMN: str = "is_duplicate"
ISSUE_FLAG_COLUMN: str = "has_issue"

# Maximum undo snapshots retained by DatasetHistory
MAX_HISTORY_SNAPSHOTS: int = 10


# ============================================================================
# Engine Execution
# ============================================================================

# Rows processed between cancellation checks in row-wise passes
DEFAULT_BATCH_SIZE: int = 5_000


# ============================================================================
# Configuration Security Limits
# ============================================================================

# Maximum YAML configuration file size (10MB)
MAX_YAML_FILE_SIZE: int = 10 * 1024 * 1024

# Maximum YAML nesting depth
MAX_YAML_NESTING_DEPTH: int = 20

# Maximum number of keys in a YAML document
MAX_YAML_KEY_COUNT: int = 10_000


# ============================================================================
# Logging Constants
# ============================================================================

LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT: str = "%Y-%m-%d %H:%M:%S"


# ============================================================================
# File Format Constants
# ============================================================================

FILE_EXTENSION_MAP: dict = {
    ".csv": "csv",
    ".txt": "csv",
    ".xlsx": "excel",
    ".xls": "excel",
}

SUPPORTED_FILE_FORMATS: list = ["csv", "excel"]

# Maximum size of a data file accepted by the table loader (50MB)
MAX_DATA_FILE_SIZE: int = 50 * 1024 * 1024
