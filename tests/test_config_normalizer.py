"""
Tests for legacy -> unified normalization and legacy map decoding
"""

import json
import pytest

from app.errors import DecodeError, ValidationError
from app.schemas.pricing import ModelConfig
from app.services.config_normalizer import (
    normalize,
    normalize_document,
    parse_legacy_map,
    dump_legacy_map,
    is_blank_document,
)


class TestNormalize:

    def test_key_set_is_union_of_legacy_maps(self):
        ratio = {"gpt-4": 0.03, "gpt-3.5-turbo": 0.0015}
        completion = {"gpt-4": 2.0, "claude-3-opus": 5.0}

        result = normalize(ratio, completion)

        assert set(result) == {"gpt-4", "gpt-3.5-turbo", "claude-3-opus"}

    def test_fields_mirror_their_legacy_source(self):
        result = normalize({"gpt-4": 0.03, "only-ratio": 0.01}, {"gpt-4": 2.0, "only-completion": 3.0})

        assert result["gpt-4"] == ModelConfig.build(ratio=0.03, completion_ratio=2.0)
        assert result["only-ratio"].ratio == 0.01
        assert result["only-ratio"].completion_ratio is None
        assert result["only-completion"].ratio is None
        assert result["only-completion"].completion_ratio == 3.0

    def test_max_tokens_never_set(self):
        result = normalize({"gpt-4": 0.03}, {"gpt-4": 2.0})
        assert result["gpt-4"].max_tokens is None

    def test_zero_ratio_is_kept(self):
        result = normalize({"free-model": 0}, None)
        assert result["free-model"].ratio == 0

    def test_empty_input(self):
        assert normalize(None, None) == {}
        assert normalize({}, {}) == {}

    def test_deterministic_output(self):
        ratio = {"b": 0.2, "a": 0.1, "c": 0.3}
        completion = {"c": 1.5, "a": 2.0}

        first = json.dumps(normalize_document(ratio, completion))
        second = json.dumps(normalize_document(dict(reversed(list(ratio.items()))), completion))

        assert first == second
        assert list(normalize(ratio, completion)) == ["a", "b", "c"]

    def test_document_omits_absent_fields(self):
        assert normalize_document({"gpt-4": 0.03}, {}) == {"gpt-4": {"ratio": 0.03}}


class TestParseLegacyMap:

    @pytest.mark.parametrize("raw", [None, "", "   ", "{}", {}])
    def test_blank_is_empty(self, raw):
        assert is_blank_document(raw)
        assert parse_legacy_map(raw) == {}

    def test_decodes_json_text(self):
        assert parse_legacy_map('{"gpt-4": 0.03, "free": 0}') == {"gpt-4": 0.03, "free": 0.0}

    def test_invalid_json(self):
        with pytest.raises(DecodeError) as exc_info:
            parse_legacy_map("{not json", "completion_ratio")
        assert exc_info.value.message.startswith("Invalid JSON in completion_ratio")

    def test_nesting_too_deep(self):
        with pytest.raises(DecodeError) as exc_info:
            parse_legacy_map("[" * 100000, "model_ratio")
        assert exc_info.value.message.startswith("Invalid JSON in model_ratio")

    def test_array_rejected(self):
        with pytest.raises(ValidationError):
            parse_legacy_map("[0.03]")

    @pytest.mark.parametrize("value", [-1, "0.03", None, True])
    def test_bad_value_rejected(self, value):
        with pytest.raises(ValidationError) as exc_info:
            parse_legacy_map({"gpt-4": value})
        assert exc_info.value.model_name == "gpt-4"

    def test_blank_model_name_rejected(self):
        with pytest.raises(ValidationError):
            parse_legacy_map({" ": 0.03})

    def test_dump_sorted(self):
        assert dump_legacy_map({"b": 0.2, "a": 0.1}) == '{"a": 0.1, "b": 0.2}'
        assert dump_legacy_map({}) is None
