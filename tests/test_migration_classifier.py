"""
Tests for migration status classification
"""

import itertools
import pytest

from app.models.channel import MigrationStatus
from app.schemas.pricing import ModelConfig
from app.services.migration_classifier import classify, classify_flags
from app.services.pricing_store import ChannelPricing


class TestClassifyFlags:

    @pytest.mark.parametrize("unified,ratio,completion,expected", [
        (False, False, False, MigrationStatus.EMPTY),
        (False, True, False, MigrationStatus.NEEDS_MIGRATION),
        (False, False, True, MigrationStatus.NEEDS_MIGRATION),
        (False, True, True, MigrationStatus.NEEDS_MIGRATION),
        (True, False, False, MigrationStatus.MIGRATED),
        (True, True, False, MigrationStatus.MIGRATED_WITH_LEGACY),
        (True, False, True, MigrationStatus.MIGRATED_WITH_LEGACY),
        (True, True, True, MigrationStatus.MIGRATED_WITH_LEGACY),
    ])
    def test_truth_table(self, unified, ratio, completion, expected):
        assert classify_flags(unified, ratio, completion) is expected

    def test_every_combination_has_a_status(self):
        for flags in itertools.product([False, True], repeat=3):
            assert classify_flags(*flags) in set(MigrationStatus)


class TestClassify:

    def test_needs_migration_report(self):
        pricing = ChannelPricing(
            channel_id=1,
            legacy_model_ratio={"gpt-4": 0.03, "gpt-3.5-turbo": 0.0015},
            legacy_completion_ratio={"gpt-4": 2.0},
        )

        report = classify(pricing)

        assert report.status is MigrationStatus.NEEDS_MIGRATION
        assert report.has_model_ratio
        assert report.has_completion_ratio
        assert not report.has_model_configs
        assert report.model_ratio_count == 2
        assert report.completion_ratio_count == 1
        assert report.model_ratio_models == ["gpt-3.5-turbo", "gpt-4"]

    def test_migrated_report(self):
        pricing = ChannelPricing(
            channel_id=1,
            unified_model_configs={"gpt-4": ModelConfig.build(ratio=0.03)},
        )

        report = classify(pricing)

        assert report.status is MigrationStatus.MIGRATED
        assert report.model_configs_count == 1
        assert report.model_configs_models == ["gpt-4"]

    def test_empty_maps_count_as_absent(self):
        pricing = ChannelPricing(channel_id=1, legacy_model_ratio={}, unified_model_configs={})
        assert classify(pricing).status is MigrationStatus.EMPTY

    def test_to_dict_uses_status_value(self):
        report = classify(ChannelPricing(channel_id=1))
        assert report.to_dict()["migration_status"] == "empty"
