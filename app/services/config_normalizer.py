"""
Config Normalizer

Merges the two legacy flat rate maps into unified per-model configs.
Full regeneration from legacy input only; existing unified data is ignored.
"""

import json
import math
from typing import Any, Dict, Mapping, Optional

from ..errors import DecodeError, ValidationError
from ..schemas.pricing import ModelConfig


def normalize(
    legacy_ratio: Optional[Mapping[str, float]],
    legacy_completion: Optional[Mapping[str, float]],
) -> Dict[str, ModelConfig]:
    """
    Build one entry per model found in either legacy map.

    ratio / completion_ratio mirror the legacy source when the model is
    present there and stay absent otherwise. max_tokens is always absent.
    Keys come out sorted, so identical input gives identical output.
    """
    legacy_ratio = legacy_ratio or {}
    legacy_completion = legacy_completion or {}

    merged = {}
    for model_name in sorted(set(legacy_ratio) | set(legacy_completion)):
        merged[model_name] = ModelConfig.build(
            ratio=legacy_ratio.get(model_name),
            completion_ratio=legacy_completion.get(model_name),
        )
    return merged


def normalize_document(
    legacy_ratio: Optional[Mapping[str, float]],
    legacy_completion: Optional[Mapping[str, float]],
) -> Dict[str, Dict[str, Any]]:
    """Same as normalize(), in wire form"""
    return configs_to_document(normalize(legacy_ratio, legacy_completion))


def configs_to_document(configs: Optional[Mapping[str, ModelConfig]]) -> Dict[str, Dict[str, Any]]:
    return {name: config.to_document() for name, config in sorted((configs or {}).items())}


def is_blank_document(raw: Any) -> bool:
    """None, "", whitespace and "{}" all mean the map is absent"""
    if raw is None:
        return True
    if isinstance(raw, str):
        stripped = raw.strip()
        return stripped == "" or stripped == "{}"
    if isinstance(raw, Mapping):
        return len(raw) == 0
    return False


def parse_legacy_map(raw: Any, field: str = "model_ratio") -> Dict[str, float]:
    """
    Decode a stored legacy map (model name -> non-negative number).

    Raises:
        DecodeError: the document is not valid JSON
        ValidationError: not an object, blank model name, or bad value
    """
    if is_blank_document(raw):
        return {}

    data = raw
    if isinstance(raw, str):
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, RecursionError) as e:
            raise DecodeError(f"Invalid JSON in {field}: {e}")

    if not isinstance(data, dict):
        raise ValidationError(f"{field} must be an object", field=field)

    result = {}
    for model_name, value in data.items():
        if not model_name or not model_name.strip():
            raise ValidationError(f"Empty model name in {field}", field=field)
        if isinstance(value, bool) or not isinstance(value, (int, float)) or math.isnan(value) \
                or math.isinf(value) or value < 0:
            raise ValidationError(
                f'Model "{model_name}" has invalid {field}: must be a non-negative number',
                model_name=model_name,
                field=field,
            )
        result[model_name] = float(value)
    return result


def dump_legacy_map(values: Optional[Mapping[str, float]]) -> Optional[str]:
    if not values:
        return None
    return json.dumps(dict(sorted(values.items())))
