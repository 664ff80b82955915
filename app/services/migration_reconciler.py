"""
Migration Reconciler

Moves legacy pricing into unified model configs for a channel ("fix").

Policy (unified wins):
- every model already in the unified map is kept exactly as it is
- models only known to the legacy maps are added from the normalized legacy data
- legacy maps are never modified or purged

Running fix twice is a no-op the second time: nothing is left to add, so
the write is skipped.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from ..errors import PricingError
from ..models.channel import MigrationStatus
from ..schemas.pricing import ModelConfig
from ..utils.logging_config import get_logger
from .config_normalizer import normalize
from .migration_classifier import MigrationReport, classify
from .pricing_store import ChannelPricing, PricingStore

logger = get_logger(__name__)


@dataclass
class FixResult:
    """Result of reconciling one channel"""
    pricing: ChannelPricing
    report: MigrationReport
    added_models: List[str] = field(default_factory=list)
    written: bool = False


@dataclass
class FixAllResult:
    """Result of reconciling every channel that has legacy pricing"""
    checked: int = 0
    fixed: int = 0
    unchanged: int = 0
    failed: int = 0
    errors: Dict[int, str] = field(default_factory=dict)


def merge_unified_wins(
    existing: Optional[Dict[str, ModelConfig]],
    candidate: Dict[str, ModelConfig],
) -> Tuple[Dict[str, ModelConfig], List[str]]:
    """
    Add candidate entries whose model is missing from existing.

    Returns the merged map and the sorted list of models that were added.
    """
    merged = dict(existing or {})
    added = []
    for model_name in sorted(candidate):
        if model_name not in merged:
            merged[model_name] = candidate[model_name]
            added.append(model_name)
    return merged, added


class MigrationReconciler:
    """Read-modify-write of a channel's unified pricing from its legacy maps"""

    def __init__(self, db: Session, store: Optional[PricingStore] = None):
        self.db = db
        self.store = store or PricingStore(db)

    def fix(self, channel_id: int) -> FixResult:
        """
        Reconcile one channel.

        Raises:
            NotFoundError: unknown channel
            StoreWriteError: the write failed or raced another update; nothing was changed
        """
        pricing = self.store.get(channel_id, lock=True)
        candidate = normalize(pricing.legacy_model_ratio, pricing.legacy_completion_ratio)
        merged, added = merge_unified_wins(pricing.unified_model_configs, candidate)

        if not added:
            # Release the row lock
            self.db.rollback()
            report = classify(pricing)
            logger.info(f"Channel {channel_id} pricing already reconciled ({report.status.value})")
            return FixResult(pricing=pricing, report=report)

        updated = self.store.write_unified(channel_id, merged, expected_version=pricing.version)
        report = classify(updated)
        logger.pricing_fixed(channel_id, added, report.status.value)
        return FixResult(pricing=updated, report=report, added_models=added, written=True)

    def fix_all(self) -> FixAllResult:
        """
        Reconcile every channel that still has legacy pricing.

        A failing channel is recorded and skipped; the run continues.
        """
        result = FixAllResult()
        for channel_id in self.store.list_ids():
            try:
                pricing = self.store.get(channel_id)
                if not (pricing.legacy_model_ratio or pricing.legacy_completion_ratio):
                    continue
                result.checked += 1
                outcome = self.fix(channel_id)
            except PricingError as e:
                self.db.rollback()
                logger.error(f"Channel {channel_id}: reconcile failed: {e.message}")
                result.failed += 1
                result.errors[channel_id] = e.message
                continue

            if outcome.written:
                result.fixed += 1
            else:
                result.unchanged += 1

        logger.info(
            f"Reconcile run: {result.fixed} fixed, {result.unchanged} unchanged, "
            f"{result.failed} failed of {result.checked} channels with legacy pricing"
        )
        return result

    def summary(self) -> Dict[str, object]:
        """Count channels per migration status; unreadable pricing counts as invalid"""
        counts = {status.value: 0 for status in MigrationStatus}
        invalid: Dict[int, str] = {}
        for channel_id in self.store.list_ids():
            try:
                pricing = self.store.get(channel_id)
            except PricingError as e:
                logger.error(f"Channel {channel_id}: invalid pricing data: {e.message}")
                invalid[channel_id] = e.message
                continue
            counts[classify(pricing).status.value] += 1

        return {
            "total": sum(counts.values()) + len(invalid),
            "statuses": counts,
            "invalid": invalid,
        }


def get_migration_reconciler(db: Session) -> MigrationReconciler:
    """Factory function to get a reconciler instance"""
    return MigrationReconciler(db)
