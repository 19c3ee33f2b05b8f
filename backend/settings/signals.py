"""
Signal handlers for the settings app.
Automatically refreshes the configuration cache when GlobalSettings is modified.
"""

import logging

from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import GlobalSettings

logger = logging.getLogger(__name__)


@receiver(post_save, sender=GlobalSettings)
def reload_app_settings(sender, instance, created, raw=False, **kwargs):
    """
    Reload AppSettings when GlobalSettings is updated and recalculate every
    in-progress order so a new tax rate applies immediately.
    """
    if raw:
        return

    # Import here to avoid circular imports and ensure the singleton is loaded
    from .config import app_settings

    if created:
        # First row is being written while settings load; pick it up lazily.
        app_settings.invalidate()
        return

    app_settings.reload()
    logger.info("Configuration cache updated: %r", app_settings)

    from orders.services import OrderCalculationService

    recalculated_count = OrderCalculationService.recalculate_in_progress_orders()
    logger.info("Applied configuration changes to %s in-progress orders", recalculated_count)
