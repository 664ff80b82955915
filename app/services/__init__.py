# Services package
from .price_units import PriceUnit, to_display_price, to_ratio, format_display_price, display_price_table
from .config_normalizer import normalize, normalize_document, parse_legacy_map
from .config_validator import validate, parse_model_configs, ValidationResult
from .pricing_store import PricingStore, ChannelPricing
from .migration_classifier import classify, classify_flags, MigrationReport
from .migration_reconciler import (
    MigrationReconciler,
    FixResult,
    FixAllResult,
    merge_unified_wins,
    get_migration_reconciler
)
from .default_pricing import defaults_for, legacy_defaults_for

__all__ = [
    "PriceUnit", "to_display_price", "to_ratio", "format_display_price", "display_price_table",
    "normalize", "normalize_document", "parse_legacy_map",
    "validate", "parse_model_configs", "ValidationResult",
    "PricingStore", "ChannelPricing",
    "classify", "classify_flags", "MigrationReport",
    "MigrationReconciler", "FixResult", "FixAllResult", "merge_unified_wins", "get_migration_reconciler",
    "defaults_for", "legacy_defaults_for",
]
