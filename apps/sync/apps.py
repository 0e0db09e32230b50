from django.apps import AppConfig


class SyncConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.sync"
    verbose_name = "Offline sync"

    # SyncRuntime, built lazily by apps.sync.services.get_runtime
    runtime = None
