"""
Tests for environment-driven settings
"""

import pytest

from app.config import Settings


class TestSettings:

    def test_display_unit_normalized(self):
        settings = Settings(PRICE_DISPLAY_UNIT=" Per_Thousand ")
        assert settings.price_display_unit == "per_thousand"

    def test_display_unit_rejected(self):
        with pytest.raises(ValueError):
            Settings(PRICE_DISPLAY_UNIT="per_token")

    def test_cors_origins_deduplicated(self):
        settings = Settings(ALLOWED_ORIGINS="http://a.test/, http://a.test,http://b.test")
        assert settings.cors_origins == ["http://a.test", "http://b.test"]

    def test_cors_origins_fallback(self):
        assert Settings(ALLOWED_ORIGINS=" , ").cors_origins == ["http://localhost:5173"]

    def test_lock_nowait_from_alias(self):
        assert Settings(PRICING_LOCK_NOWAIT=True).pricing_lock_nowait is True
