"""
Migration Classifier

Derives how far a channel's pricing has moved to unified model configs:

| unified | legacy  | status               |
|---------|---------|----------------------|
| empty   | empty   | empty                |
| empty   | present | needs_migration      |
| present | empty   | migrated             |
| present | present | migrated_with_legacy |

"legacy present" means either legacy map is non-empty.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..models.channel import MigrationStatus
from .pricing_store import ChannelPricing


@dataclass
class MigrationReport:
    status: MigrationStatus
    has_model_configs: bool
    has_model_ratio: bool
    has_completion_ratio: bool
    model_configs_count: int = 0
    model_ratio_count: int = 0
    completion_ratio_count: int = 0
    model_configs_models: List[str] = field(default_factory=list)
    model_ratio_models: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "migration_status": self.status.value,
            "has_model_configs": self.has_model_configs,
            "has_model_ratio": self.has_model_ratio,
            "has_completion_ratio": self.has_completion_ratio,
            "model_configs_count": self.model_configs_count,
            "model_ratio_count": self.model_ratio_count,
            "completion_ratio_count": self.completion_ratio_count,
            "model_configs_models": self.model_configs_models,
            "model_ratio_models": self.model_ratio_models,
        }


def classify_flags(unified_non_empty: bool, legacy_ratio_non_empty: bool,
                   legacy_completion_non_empty: bool) -> MigrationStatus:
    legacy_present = legacy_ratio_non_empty or legacy_completion_non_empty
    if unified_non_empty:
        return MigrationStatus.MIGRATED_WITH_LEGACY if legacy_present else MigrationStatus.MIGRATED
    return MigrationStatus.NEEDS_MIGRATION if legacy_present else MigrationStatus.EMPTY


def classify(pricing: ChannelPricing) -> MigrationReport:
    unified = pricing.unified_model_configs or {}
    model_ratio = pricing.legacy_model_ratio or {}
    completion_ratio = pricing.legacy_completion_ratio or {}

    return MigrationReport(
        status=classify_flags(bool(unified), bool(model_ratio), bool(completion_ratio)),
        has_model_configs=bool(unified),
        has_model_ratio=bool(model_ratio),
        has_completion_ratio=bool(completion_ratio),
        model_configs_count=len(unified),
        model_ratio_count=len(model_ratio),
        completion_ratio_count=len(completion_ratio),
        model_configs_models=sorted(unified),
        model_ratio_models=sorted(model_ratio),
    )
