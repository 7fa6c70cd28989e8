"""
HB Sync Store - App Configuration
===================================
Persistent sync claims (one row per location/business day/provider).
"""

from django.apps import AppConfig


class SyncStoreConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "core.sync_store"
    label = "sync_store"
    verbose_name = "HB Sync Store"
