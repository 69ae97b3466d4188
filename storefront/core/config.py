"""Storefront Configuration"""

import logging
from typing import Optional
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client settings loaded from environment"""

    model_config = SettingsConfigDict(
        env_prefix="STOREFRONT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Food Delivery App"
    debug: bool = False
    log_level: str = "INFO"

    # Restaurant API
    api_base_url: str = "http://localhost:8001"
    request_timeout: float = 30.0
    auth_token: Optional[str] = None

    # Money
    currency: str = "INR"
    currency_symbol: str = "₹"
    fallback_tax_rate: float = 0.04

    # Hosted payment widget
    gateway_key_id: str = "rzp_test_storefront"
    merchant_name: str = "Food Delivery App"
    payment_description: str = "Food Order Payment"
    theme_color: str = "#FC8019"

    # Cart synchronization
    discard_stale_cart_fetches: bool = False

    @property
    def logging_level(self) -> int:
        """Numeric level for logging.basicConfig"""
        if self.debug:
            return logging.DEBUG
        level = logging.getLevelName(self.log_level.upper())
        return level if isinstance(level, int) else logging.INFO


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
