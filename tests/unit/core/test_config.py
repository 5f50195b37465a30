"""
Unit tests for EngineConfig and ProjectConfig (YAML loading and its
security limits).
"""

from datetime import date, datetime

import pytest

from tablesift.core.config import EngineConfig, ProjectConfig
from tablesift.core.exceptions import ConfigError, ConfigValidationError, YAMLSizeError


# ============================================================================
# ENGINE CONFIG
# ============================================================================

@pytest.mark.unit
class TestEngineConfig:
    """Test engine configuration defaults and validation."""

    def test_defaults(self):
        config = EngineConfig()

        assert config.type_sample_size == 100
        assert config.outlier_z_threshold == 2.5
        assert config.outlier_min_values == 4
        assert config.max_outliers_per_column == 20
        assert config.max_contextual_issues == 1000
        assert config.max_cross_field_issues == 500
        assert config.max_affected_rows == 1000
        assert config.batch_size == 5000
        assert config.duplicate_flag_column == "is_duplicate"
        assert config.issue_flag_column == "has_issue"

    @pytest.mark.parametrize("field_name,value", [
        ("type_sample_size", 0),
        ("max_contextual_issues", -1),
        ("batch_size", True),
        ("max_affected_rows", 2.5),
    ])
    def test_rejects_non_positive_integers(self, field_name, value):
        with pytest.raises(ConfigValidationError) as exc_info:
            EngineConfig(**{field_name: value})
        assert exc_info.value.field == field_name

    @pytest.mark.parametrize("value", [0, 1.5, -0.1])
    def test_rejects_ratio_out_of_range(self, value):
        with pytest.raises(ConfigValidationError):
            EngineConfig(number_match_ratio=value)

    def test_rejects_non_positive_z_threshold(self):
        with pytest.raises(ConfigValidationError):
            EngineConfig(outlier_z_threshold=0)

    def test_reference_date_pins_today_and_now(self):
        config = EngineConfig(reference_date=date(2024, 6, 1))

        assert config.today() == date(2024, 6, 1)
        assert config.now() == datetime(2024, 6, 1)

    def test_datetime_reference_is_truncated(self):
        config = EngineConfig(reference_date=datetime(2024, 6, 1, 15, 30))
        assert config.reference_date == date(2024, 6, 1)

    def test_from_dict_parses_iso_reference(self):
        config = EngineConfig.from_dict({"reference_date": "2023-02-01", "max_affected_rows": 50})

        assert config.reference_date == date(2023, 2, 1)
        assert config.max_affected_rows == 50

    def test_from_dict_rejects_unknown_keys(self):
        with pytest.raises(ConfigValidationError) as exc_info:
            EngineConfig.from_dict({"max_issues": 10})
        assert "max_issues" in str(exc_info.value)

    def test_from_dict_rejects_bad_reference(self):
        with pytest.raises(ConfigValidationError):
            EngineConfig.from_dict({"reference_date": "June first"})

    def test_to_dict_serializes_reference(self):
        data = EngineConfig(reference_date=date(2024, 6, 1)).to_dict()

        assert data["reference_date"] == "2024-06-01"
        assert data["batch_size"] == 5000


# ============================================================================
# PROJECT CONFIG (YAML)
# ============================================================================

@pytest.mark.unit
class TestProjectConfigYaml:
    """Test loading YAML configuration files."""

    def test_load_engine_and_rules(self, tmp_path):
        path = tmp_path / "tablesift.yaml"
        path.write_text(
            "engine:\n"
            "  max_contextual_issues: 10\n"
            "  reference_date: 2024-06-01\n"
            "rules:\n"
            "  - id: negative_age\n"
            "    name: Age must not be negative\n"
            "    condition: age < 0\n"
            "    severity: critical\n"
            "    columns: [age]\n"
        )

        project = ProjectConfig.from_yaml(str(path))

        assert project.engine.max_contextual_issues == 10
        assert project.engine.reference_date == date(2024, 6, 1)
        assert project.rules[0]["id"] == "negative_age"
        assert project.source_path == str(path)

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        project = ProjectConfig.from_yaml(str(path))

        assert project.engine == EngineConfig()
        assert project.rules == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            ProjectConfig.from_yaml(str(tmp_path / "nope.yaml"))

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("engine: [unclosed\n")

        with pytest.raises(ConfigError, match="Failed to parse YAML"):
            ProjectConfig.from_yaml(str(path))

    def test_unknown_top_level_key(self, tmp_path):
        path = tmp_path / "extra.yaml"
        path.write_text("files: []\n")

        with pytest.raises(ConfigValidationError, match="files"):
            ProjectConfig.from_yaml(str(path))

    def test_rules_must_be_list_of_mappings(self):
        with pytest.raises(ConfigValidationError):
            ProjectConfig.from_dict({"rules": ["age < 0"]})

    def test_root_must_be_mapping(self):
        with pytest.raises(ConfigValidationError):
            ProjectConfig.from_dict(["engine"])

    def test_file_size_limit(self, tmp_path, monkeypatch):
        path = tmp_path / "big.yaml"
        path.write_text("engine: {}\n")
        monkeypatch.setattr(ProjectConfig, "MAX_YAML_FILE_SIZE", 4)

        with pytest.raises(YAMLSizeError):
            ProjectConfig.from_yaml(str(path))

    def test_nesting_depth_limit(self, tmp_path):
        nested = "x"
        for _ in range(25):
            nested = {"k": nested}

        with pytest.raises(ConfigValidationError, match="nesting depth"):
            ProjectConfig._validate_yaml_structure(nested)

    def test_key_count_limit(self):
        with pytest.raises(ConfigValidationError, match="keys"):
            ProjectConfig._validate_yaml_structure({f"k{i}": i for i in range(10_001)})
