#!/usr/bin/env python3
"""
Configuration Manager for the estimator using Pydantic models.
Manages tax, shipping and currency settings used to roll up estimates.
"""

import json
import os
from typing import Optional
from pathlib import Path
import logging
from models.config_models import PricingConfig, ConfigUpdateRequest


class ConfigManager:
    """Manages the pricing configuration using Pydantic models"""

    def __init__(self, config_file_path: Optional[str] = None):
        self.logger = logging.getLogger(self.__class__.__name__)

        # Default config file location
        if config_file_path is None:
            self.config_dir = Path.home() / 'AppData' / 'Roaming' / 'PrintEstimator'
            os.makedirs(self.config_dir, exist_ok=True)
            self.config_file = self.config_dir / 'pricing_config.json'
        else:
            self.config_file = Path(config_file_path)
            os.makedirs(self.config_file.parent, exist_ok=True)

        self.config = self._load_config()

    def _load_config(self) -> PricingConfig:
        """Load configuration from file, create default if doesn't exist"""
        try:
            if self.config_file.exists():
                with open(self.config_file, 'r', encoding='utf-8') as f:
                    config_data = json.load(f)
                config = PricingConfig(**config_data)
                self.logger.info(f"Loaded configuration from {self.config_file}")
                return config
        except Exception as e:
            self.logger.error(f"Error loading config file: {e}")

        # Return default config and save it
        default_config = PricingConfig.get_default_config()
        self._save_config(default_config)
        self.logger.info("Created default configuration")
        return default_config

    def _save_config(self, config: PricingConfig) -> None:
        """Save configuration to file"""
        try:
            with open(self.config_file, 'w', encoding='utf-8') as f:
                json.dump(config.model_dump(), f, indent=2, ensure_ascii=False)
            self.logger.info(f"Configuration saved to {self.config_file}")
        except Exception as e:
            self.logger.error(f"Error saving config file: {e}")
            raise

    def get_config(self) -> PricingConfig:
        """Get the pricing configuration"""
        return self.config

    def update_config(self, update_request: ConfigUpdateRequest) -> bool:
        """Update configuration based on request"""
        try:
            changes = update_request.model_dump(exclude_none=True)
            if not changes:
                self.logger.info("No configuration changes requested")
                return True

            # Validate the merged result before replacing the current config
            merged = self.config.model_dump()
            merged.update(changes)
            new_config = PricingConfig(**merged)

            self._save_config(new_config)
            self.config = new_config
            for field in changes:
                self.logger.info(f"Updated {field} to {getattr(new_config, field)}")
            return True

        except Exception as e:
            self.logger.error(f"Error updating config: {e}")
            return False

    def reset_to_defaults(self) -> bool:
        """Reset configuration to defaults"""
        try:
            self.config = PricingConfig.get_default_config()
            self._save_config(self.config)
            self.logger.info("Configuration reset to defaults")
            return True
        except Exception as e:
            self.logger.error(f"Error resetting config to defaults: {e}")
            return False

    def get_config_summary(self) -> dict:
        """Get a summary of current configuration for display"""
        try:
            return {
                "tax_rate": self.config.tax_rate,
                "shipping_free_threshold": self.config.shipping_free_threshold,
                "currency_symbol": self.config.currency_symbol,
                "shipping_regions": {
                    region: {"cost": shipping.cost, "prefecture_count": len(shipping.prefectures)}
                    for region, shipping in self.config.shipping_costs.items()
                }
            }
        except Exception as e:
            self.logger.error(f"Error getting config summary: {e}")
            return {}
