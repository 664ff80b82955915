"""
Default Pricing Provider

Built-in pricing used to pre-fill the pricing editor of a new or not yet
configured channel. Advisory only: nothing here reads or writes the store.

Ratios are USD per token, so a price of $30 per 1M tokens is 30 * PER_MILLION_USD.
Some adaptors ship a full unified document (with max_tokens); the rest only
have legacy ratio / completion-ratio tables, which are normalized on demand.
"""

from typing import Dict, Tuple

from ..models.channel import ChannelType
from ..schemas.pricing import ModelConfig
from .config_normalizer import normalize, configs_to_document

PER_MILLION_USD = 1 / 1_000_000


def _m(price_per_million: float) -> float:
    return price_per_million * PER_MILLION_USD


OPENAI_MODEL_CONFIGS: Dict[str, ModelConfig] = {
    "gpt-3.5-turbo": ModelConfig.build(ratio=_m(0.5), completion_ratio=3.0, max_tokens=16385),
    "gpt-4": ModelConfig.build(ratio=_m(30), completion_ratio=2.0, max_tokens=8192),
    "gpt-4-turbo": ModelConfig.build(ratio=_m(10), completion_ratio=3.0, max_tokens=128000),
    "gpt-4o": ModelConfig.build(ratio=_m(2.5), completion_ratio=4.0, max_tokens=128000),
    "gpt-4o-mini": ModelConfig.build(ratio=_m(0.15), completion_ratio=4.0, max_tokens=128000),
    "gpt-4.1": ModelConfig.build(ratio=_m(2), completion_ratio=4.0, max_tokens=1047576),
    "gpt-4.1-mini": ModelConfig.build(ratio=_m(0.4), completion_ratio=4.0, max_tokens=1047576),
    "o3-mini": ModelConfig.build(ratio=_m(1.1), completion_ratio=4.0, max_tokens=200000),
    "text-embedding-3-small": ModelConfig.build(ratio=_m(0.02), max_tokens=8191),
    "text-embedding-3-large": ModelConfig.build(ratio=_m(0.13), max_tokens=8191),
}

ANTHROPIC_MODEL_CONFIGS: Dict[str, ModelConfig] = {
    "claude-3-haiku-20240307": ModelConfig.build(ratio=_m(0.25), completion_ratio=5.0, max_tokens=200000),
    "claude-3-5-haiku-20241022": ModelConfig.build(ratio=_m(0.8), completion_ratio=5.0, max_tokens=200000),
    "claude-3-opus-20240229": ModelConfig.build(ratio=_m(15), completion_ratio=5.0, max_tokens=200000),
    "claude-3-5-sonnet-20241022": ModelConfig.build(ratio=_m(3), completion_ratio=5.0, max_tokens=200000),
    "claude-3-7-sonnet-20250219": ModelConfig.build(ratio=_m(3), completion_ratio=5.0, max_tokens=200000),
    "claude-sonnet-4-20250514": ModelConfig.build(ratio=_m(3), completion_ratio=5.0, max_tokens=200000),
    "claude-opus-4-20250514": ModelConfig.build(ratio=_m(15), completion_ratio=5.0, max_tokens=200000),
}

UNIFIED_DEFAULTS: Dict[ChannelType, Dict[str, ModelConfig]] = {
    ChannelType.OPENAI: OPENAI_MODEL_CONFIGS,
    ChannelType.AZURE: OPENAI_MODEL_CONFIGS,
    ChannelType.ANTHROPIC: ANTHROPIC_MODEL_CONFIGS,
    ChannelType.AWS_CLAUDE: ANTHROPIC_MODEL_CONFIGS,
}

# (model_ratio, completion_ratio) per adaptor without a unified table
LEGACY_DEFAULTS: Dict[ChannelType, Tuple[Dict[str, float], Dict[str, float]]] = {
    ChannelType.DEEPSEEK: (
        {"deepseek-chat": _m(0.27), "deepseek-reasoner": _m(0.55)},
        {"deepseek-chat": 1.1 / 0.27, "deepseek-reasoner": 2.19 / 0.55},
    ),
    ChannelType.GEMINI: (
        {"gemini-1.5-flash": _m(0.075), "gemini-1.5-pro": _m(1.25), "gemini-2.0-flash": _m(0.1),
         "gemini-2.5-pro": _m(1.25), "text-embedding-004": 0.0},
        {"gemini-1.5-flash": 4.0, "gemini-1.5-pro": 4.0, "gemini-2.0-flash": 4.0, "gemini-2.5-pro": 8.0},
    ),
    ChannelType.GROQ: (
        {"llama-3.1-8b-instant": _m(0.05), "llama-3.3-70b-versatile": _m(0.59), "gemma2-9b-it": _m(0.2)},
        {"llama-3.1-8b-instant": 1.6, "llama-3.3-70b-versatile": 0.79 / 0.59, "gemma2-9b-it": 1.0},
    ),
    ChannelType.MISTRAL: (
        {"mistral-small-latest": _m(0.2), "mistral-large-latest": _m(2), "codestral-latest": _m(0.3),
         "mistral-embed": _m(0.1)},
        {"mistral-small-latest": 3.0, "mistral-large-latest": 3.0, "codestral-latest": 3.0},
    ),
    ChannelType.MOONSHOT: (
        {"moonshot-v1-8k": _m(12 / 7.3), "moonshot-v1-32k": _m(24 / 7.3), "moonshot-v1-128k": _m(60 / 7.3)},
        {},
    ),
    ChannelType.ZHIPU: (
        {"glm-4": _m(100 / 7.3), "glm-4-flash": 0.0, "glm-4-air": _m(1 / 7.3)},
        {},
    ),
    ChannelType.XAI: (
        {"grok-2": _m(2), "grok-3": _m(3), "grok-3-mini": _m(0.3)},
        {"grok-2": 5.0, "grok-3": 5.0, "grok-3-mini": 0.5 / 0.3},
    ),
}

# Adaptors that can reach any upstream model get every known default
AGGREGATE_TYPES = (ChannelType.CUSTOM, ChannelType.OPENAI_COMPATIBLE)


def _to_channel_type(channel_type) -> ChannelType:
    try:
        return ChannelType(int(channel_type))
    except (TypeError, ValueError):
        return ChannelType.UNKNOWN


def _configs_for(channel_type: ChannelType) -> Dict[str, ModelConfig]:
    if channel_type in UNIFIED_DEFAULTS:
        return dict(UNIFIED_DEFAULTS[channel_type])
    if channel_type in LEGACY_DEFAULTS:
        model_ratio, completion_ratio = LEGACY_DEFAULTS[channel_type]
        return normalize(model_ratio, completion_ratio)
    return {}


def _aggregate_configs() -> Dict[str, ModelConfig]:
    merged: Dict[str, ModelConfig] = {}
    for channel_type in LEGACY_DEFAULTS:
        merged.update(_configs_for(channel_type))
    # Built-in unified tables take precedence on shared model names
    for channel_type in UNIFIED_DEFAULTS:
        merged.update(_configs_for(channel_type))
    return merged


def default_model_configs(channel_type) -> Dict[str, ModelConfig]:
    channel_type = _to_channel_type(channel_type)
    if channel_type in AGGREGATE_TYPES:
        return _aggregate_configs()
    return _configs_for(channel_type)


def defaults_for(channel_type) -> Dict[str, dict]:
    """Unified default document for an adaptor type; empty when none is known"""
    return configs_to_document(default_model_configs(channel_type))


def legacy_defaults_for(channel_type) -> Tuple[Dict[str, float], Dict[str, float]]:
    """Split default maps for editors that still work on model_ratio / completion_ratio"""
    model_ratio = {}
    completion_ratio = {}
    for model_name, config in sorted(default_model_configs(channel_type).items()):
        if config.ratio is not None:
            model_ratio[model_name] = config.ratio
        if config.completion_ratio is not None:
            completion_ratio[model_name] = config.completion_ratio
    return model_ratio, completion_ratio
