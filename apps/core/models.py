import random
import string
import time

from django.db import models


class SyncStatus(models.TextChoices):
    SYNCED = "synced", "Synced"
    PENDING = "pending", "Pending"
    ERROR = "error", "Error"


class SyncableModel(models.Model):
    """Fields shared by every locally stored record"""

    sync_status = models.CharField(max_length=10, choices=SyncStatus.choices, default=SyncStatus.PENDING, db_index=True)
    last_modified = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


def generate_local_id() -> str:
    """
    Client-side identifier assigned before any server round-trip
    Format: local-<epoch ms>-<9 base36 chars>
    """
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"local-{int(time.time() * 1000)}-{suffix}"
