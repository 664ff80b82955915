"""
Pricing Schemas

Pydantic models for channel pricing documents and API payloads.
"""

from typing import Annotated, Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


NonNegativeNumber = Annotated[float, Field(ge=0, strict=True, allow_inf_nan=False)]
NonNegativeInteger = Annotated[int, Field(ge=0, strict=True)]

PRICING_FIELDS = ("ratio", "completion_ratio", "max_tokens")


class ModelConfig(BaseModel):
    """
    Unified per-model pricing entry.

    Every field is optional but an explicit null is rejected: a field is
    either absent or holds a valid value. Unknown keys are dropped.
    """
    model_config = ConfigDict(extra="ignore", frozen=True)

    ratio: Optional[NonNegativeNumber] = None
    completion_ratio: Optional[NonNegativeNumber] = None
    max_tokens: Optional[NonNegativeInteger] = None

    @field_validator('ratio', 'completion_ratio', 'max_tokens', mode='before')
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("must not be null")
        return v

    @classmethod
    def build(
        cls,
        ratio: Optional[float] = None,
        completion_ratio: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> "ModelConfig":
        """Create an entry from optional values, leaving None fields absent"""
        values = {
            "ratio": ratio,
            "completion_ratio": completion_ratio,
            "max_tokens": max_tokens,
        }
        return cls(**{k: v for k, v in values.items() if v is not None})

    def is_empty(self) -> bool:
        return self.ratio is None and self.completion_ratio is None and self.max_tokens is None

    def to_document(self) -> Dict[str, Any]:
        """Wire form with absent fields omitted"""
        return self.model_dump(exclude_none=True)


class LegacyPricingUpdate(BaseModel):
    """Direct write of the legacy flat maps (backward-compatible editors)"""
    model_config = ConfigDict(protected_namespaces=())

    model_ratio: Optional[Dict[str, NonNegativeNumber]] = None
    completion_ratio: Optional[Dict[str, NonNegativeNumber]] = None

    @field_validator('model_ratio', 'completion_ratio')
    @classmethod
    def validate_model_names(cls, v):
        if v:
            for model_name in v:
                if not model_name or not model_name.strip():
                    raise ValueError("model name cannot be empty")
        return v


class ModelConfigsUpdate(BaseModel):
    """
    Replacement unified document.

    Accepts the JSON text from an editor or any already-decoded value;
    every shape is checked by the config validator, not here.
    """
    model_config = ConfigDict(protected_namespaces=())

    model_configs: Any = None


class ValidationResultResponse(BaseModel):
    valid: bool
    error: Optional[str] = None
    model_name: Optional[str] = None
    field: Optional[str] = None
    error_kind: Optional[str] = None


class MigrationStatusResponse(BaseModel):
    """Migration classification plus channel identity"""
    model_config = ConfigDict(protected_namespaces=())

    channel_id: int
    channel_name: str
    channel_type: int
    migration_status: str
    has_model_configs: bool
    has_model_ratio: bool
    has_completion_ratio: bool
    model_configs_count: int
    model_ratio_count: int
    completion_ratio_count: int
    model_configs_models: List[str]
    model_ratio_models: List[str]


class FixResponse(MigrationStatusResponse):
    added_models: List[str]
    written: bool


class DisplayPriceRow(BaseModel):
    model: str
    input_price: float
    output_price: Optional[float] = None
    max_tokens: Optional[int] = None


class DisplayPriceTableResponse(BaseModel):
    channel_id: int
    unit: str
    rows: List[DisplayPriceRow]
