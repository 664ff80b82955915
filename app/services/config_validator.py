"""
Config Validator

Checks a submitted unified model-configs document before anything is
persisted. Checks run in a fixed order and the first failure is reported:

1. absent / blank document -> valid (pricing is optional)
2. document must be an object
3. model names must be non-blank
4. each entry must be an object
5. ratio: non-negative number
6. completion_ratio: non-negative number
7. max_tokens: non-negative integer
8. each entry needs at least one of ratio / completion_ratio / max_tokens

Rules 3-8 are applied one model at a time, in document order. Rules 5-7 come
from decoding each entry into the strict ModelConfig schema.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional

from pydantic import ValidationError as SchemaValidationError

from ..errors import DecodeError, ValidationError
from ..schemas.pricing import ModelConfig, PRICING_FIELDS

FIELD_REQUIREMENTS = {
    "ratio": "must be a non-negative number",
    "completion_ratio": "must be a non-negative number",
    "max_tokens": "must be a non-negative integer",
}


@dataclass
class ValidationResult:
    """Outcome of validate(); error is None when valid"""
    valid: bool
    error: Optional[str] = None
    model_name: Optional[str] = None
    field: Optional[str] = None
    error_kind: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "error": self.error,
            "model_name": self.model_name,
            "field": self.field,
            "error_kind": self.error_kind,
        }


def _decode(candidate: Any) -> Any:
    if not isinstance(candidate, (str, bytes, bytearray)):
        return candidate
    try:
        return json.loads(candidate)
    except (json.JSONDecodeError, UnicodeDecodeError, RecursionError) as e:
        raise DecodeError(f"Invalid JSON: {e}")


def _is_blank(candidate: Any) -> bool:
    if candidate is None:
        return True
    if isinstance(candidate, (bytes, bytearray)):
        return not candidate.strip()
    return isinstance(candidate, str) and not candidate.strip()


def _parse_entry(model_name: str, entry: Any) -> ModelConfig:
    if not isinstance(entry, dict):
        raise ValidationError(
            f'Configuration for model "{model_name}" must be an object',
            model_name=model_name,
        )

    try:
        config = ModelConfig.model_validate(entry)
    except SchemaValidationError as e:
        # Errors are reported in field declaration order
        first = e.errors()[0]
        field = str(first["loc"][0]) if first.get("loc") else None
        requirement = FIELD_REQUIREMENTS.get(field, first.get("msg", "is invalid"))
        raise ValidationError(
            f'Model "{model_name}" has invalid {field}: {requirement}',
            model_name=model_name,
            field=field,
        )

    if config.is_empty():
        raise ValidationError(
            f'Model "{model_name}" must have at least one configuration field '
            f'({", ".join(PRICING_FIELDS)})',
            model_name=model_name,
        )
    return config


def parse_model_configs(candidate: Any) -> Dict[str, ModelConfig]:
    """
    Decode and validate a unified document.

    Returns an empty mapping for an absent/blank document.

    Raises:
        DecodeError: the document is not valid JSON
        ValidationError: any rule 2-8 violation
    """
    if _is_blank(candidate):
        return {}

    document = _decode(candidate)
    if not isinstance(document, dict):
        raise ValidationError("Model configs must be an object")

    configs = {}
    for model_name, entry in document.items():
        if not isinstance(model_name, str) or not model_name.strip():
            raise ValidationError("Model name cannot be empty", model_name=model_name)
        configs[model_name] = _parse_entry(model_name, entry)
    return configs


def validate(candidate: Any) -> ValidationResult:
    """Reject-or-accept check; never repairs the document"""
    try:
        parse_model_configs(candidate)
    except DecodeError as e:
        return ValidationResult(valid=False, error=e.message, error_kind="DecodeError")
    except ValidationError as e:
        return ValidationResult(
            valid=False,
            error=e.message,
            model_name=e.model_name,
            field=e.field,
            error_kind="ValidationError",
        )
    return ValidationResult(valid=True)
