import pytest

from xaheen.config import ConfigValidationError, parse_config, validate_config


class TestValidateConfig:
    def test_valid_config_has_no_issues(self) -> None:
        data = {"version": "1.0.0", "project": {"name": "app", "framework": "react"}}

        assert validate_config(data) == []

    def test_reports_dotted_key_of_each_issue(self) -> None:
        data = {
            "project": {"framework": "cobol"},
            "compliance": {"nsm": {"classification": "TOP"}},
        }

        issues = validate_config(data, source="xaheen.config.json")

        keys = {issue.key for issue in issues}
        assert "project.framework" in keys
        assert "compliance.nsm.classification" in keys
        assert all(issue.source == "xaheen.config.json" for issue in issues)
        assert all(issue.severity == "error" for issue in issues)

    def test_unknown_top_level_key_is_allowed_by_default(self) -> None:
        assert validate_config({"plugins": []}) == []

    def test_strict_mode_rejects_unknown_keys(self) -> None:
        issues = validate_config({"plugins": []}, strict=True)

        assert [issue.key for issue in issues] == ["plugins"]


class TestParseConfig:
    def test_normalises_framework_alias(self) -> None:
        config = parse_config({"project": {"framework": "Next.js"}})

        assert config.project.framework == "nextjs"

    def test_raises_with_issues(self) -> None:
        with pytest.raises(ConfigValidationError) as exc_info:
            _ = parse_config({"generators": {"tests": "sometimes"}}, source="update")

        error = exc_info.value
        assert error.source == "update"
        assert error.issues[0].key == "generators.tests"
        assert "Invalid configuration in update" in str(error)

    def test_round_trips_camel_case(self) -> None:
        data = {"generators": {"outputDir": "app"}, "templates": {"devMode": True}}

        config = parse_config(data)

        assert config.generators.output_dir == "app"
        assert config.to_dict()["templates"]["devMode"] is True
