"""
Tests for the unified model-configs validator

Checks run in a fixed order, model by model in document order, and the
first failure is reported.
"""

import pytest

from app.errors import DecodeError, ValidationError
from app.services.config_validator import validate, parse_model_configs


class TestValidate:

    @pytest.mark.parametrize("candidate", [None, "", "   ", {}])
    def test_blank_document_is_valid(self, candidate):
        assert validate(candidate).valid

    def test_not_json(self):
        result = validate("not a document")
        assert not result.valid
        assert result.error_kind == "DecodeError"
        assert result.error.startswith("Invalid JSON:")

    def test_invalid_utf8_bytes(self):
        result = validate(b'{"gpt-4": {"ratio": 0.03}}\xff')
        assert not result.valid
        assert result.error_kind == "DecodeError"
        assert result.error.startswith("Invalid JSON:")

    def test_nesting_too_deep(self):
        result = validate("[" * 100000 + "]" * 100000)
        assert not result.valid
        assert result.error_kind == "DecodeError"
        assert result.error.startswith("Invalid JSON:")

    def test_utf8_bytes_accepted(self):
        assert validate(b'{"gpt-4": {"ratio": 0.03}}').valid

    @pytest.mark.parametrize("candidate", ["[]", "42", "null", '"text"', [{"ratio": 1}]])
    def test_document_must_be_object(self, candidate):
        result = validate(candidate)
        assert not result.valid
        assert result.error_kind == "ValidationError"
        assert result.error == "Model configs must be an object"

    def test_blank_model_name(self):
        result = validate({"  ": {"ratio": 0.03}})
        assert not result.valid
        assert result.error == "Model name cannot be empty"

    @pytest.mark.parametrize("entry", [[0.03], 0.03, "0.03", None])
    def test_entry_must_be_object(self, entry):
        result = validate({"gpt-4": entry})
        assert not result.valid
        assert result.error == 'Configuration for model "gpt-4" must be an object'
        assert result.model_name == "gpt-4"

    def test_empty_entry(self):
        result = validate({"gpt-4": {}})
        assert not result.valid
        assert "must have at least one configuration field" in result.error
        assert result.model_name == "gpt-4"

    def test_negative_ratio(self):
        result = validate({"gpt-4": {"ratio": -1}})
        assert not result.valid
        assert result.error == 'Model "gpt-4" has invalid ratio: must be a non-negative number'
        assert result.model_name == "gpt-4"
        assert result.field == "ratio"

    @pytest.mark.parametrize("value", [-0.5, "2", None])
    def test_bad_completion_ratio(self, value):
        result = validate({"gpt-4": {"completion_ratio": value}})
        assert not result.valid
        assert result.field == "completion_ratio"

    @pytest.mark.parametrize("value", [-1, 1.5, "4096", None])
    def test_bad_max_tokens(self, value):
        result = validate({"gpt-4": {"max_tokens": value}})
        assert not result.valid
        assert result.field == "max_tokens"
        assert result.error == 'Model "gpt-4" has invalid max_tokens: must be a non-negative integer'

    def test_valid_document(self):
        assert validate({"gpt-4": {"ratio": 0.03, "max_tokens": 128000}}).valid

    def test_valid_json_text(self):
        assert validate('{"gpt-4": {"ratio": 0.00003, "completion_ratio": 2}}').valid

    def test_zero_values_are_valid(self):
        assert validate({"free": {"ratio": 0, "completion_ratio": 0, "max_tokens": 0}}).valid


class TestRuleOrder:

    def test_models_checked_in_document_order(self):
        """All rules for the first model run before any rule for the second"""
        result = validate({"a-model": {}, "b-model": {"ratio": -1}})
        assert result.model_name == "a-model"
        assert "must have at least one configuration field" in result.error

    def test_ratio_reported_before_max_tokens(self):
        result = validate({"gpt-4": {"max_tokens": -1, "ratio": -1}})
        assert result.field == "ratio"

    def test_field_rules_before_empty_entry_rule(self):
        result = validate({"gpt-4": {"max_tokens": 1.5}})
        assert result.field == "max_tokens"


class TestParseModelConfigs:

    def test_returns_typed_configs(self):
        configs = parse_model_configs('{"gpt-4": {"ratio": 0.03, "max_tokens": 8192}}')
        assert configs["gpt-4"].ratio == 0.03
        assert configs["gpt-4"].max_tokens == 8192
        assert configs["gpt-4"].completion_ratio is None

    def test_unknown_keys_dropped(self):
        configs = parse_model_configs({"gpt-4": {"ratio": 0.03, "note": "beta"}})
        assert configs["gpt-4"].to_document() == {"ratio": 0.03}

    def test_blank_gives_empty_mapping(self):
        assert parse_model_configs("  ") == {}

    def test_raises_decode_error(self):
        with pytest.raises(DecodeError):
            parse_model_configs("{")

    def test_raises_validation_error(self):
        with pytest.raises(ValidationError) as exc_info:
            parse_model_configs({"gpt-4": {"ratio": -1}})
        assert exc_info.value.model_name == "gpt-4"
        assert exc_info.value.field == "ratio"
