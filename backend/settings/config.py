"""
Centralized configuration management using the Singleton pattern.
This module provides a single point of access to restaurant-wide settings,
so pricing code never queries GlobalSettings directly.
"""

import logging
from decimal import Decimal
from typing import Any, Optional

logger = logging.getLogger(__name__)


class AppSettings:
    """
    A LAZY singleton class that provides centralized access to global application settings.
    It defers database loading until the first setting is accessed, allowing management
    commands like 'migrate' to run before the settings table exists.
    """

    _instance: Optional["AppSettings"] = None
    _initialized: bool = False

    def __new__(cls) -> "AppSettings":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def _setup(self):
        if not self._initialized:
            self.load_settings()
            self._initialized = True

    def __getattr__(self, name: str) -> Any:
        """
        Lazily loads settings on first access, then retrieves the attribute.
        """
        if name.startswith("__"):
            raise AttributeError(name)

        if not self._initialized:
            self._setup()

        try:
            return self.__dict__[name]
        except KeyError:
            raise AttributeError(f"'AppSettings' object has no attribute '{name}'")

    def load_settings(self) -> None:
        """
        Load settings from the database and populate instance attributes,
        creating the settings row with project defaults the first time.
        """
        # Import here to avoid circular imports
        from .models import GlobalSettings

        settings_obj = GlobalSettings.objects.filter(pk=GlobalSettings.SINGLETON_PK).first()
        if settings_obj is None:
            settings_obj = GlobalSettings.objects.create()
            logger.info("Created default GlobalSettings instance")

        self.restaurant_name: str = settings_obj.restaurant_name
        self.tax_rate: Decimal = Decimal(settings_obj.tax_rate)
        self.currency: str = settings_obj.currency

    def reload(self) -> None:
        """
        Reload settings from the database.
        Called when GlobalSettings is saved so changes apply without a restart.
        """
        self.load_settings()
        self._initialized = True
        logger.info("AppSettings cache reloaded")

    def invalidate(self) -> None:
        """Drop loaded values; the next attribute access reloads from the database."""
        self.__dict__.clear()

    def __repr__(self) -> str:
        if not self._initialized:
            return "<AppSettings (not loaded)>"
        return f"<AppSettings tax_rate={self.tax_rate} currency={self.currency}>"


app_settings = AppSettings()
