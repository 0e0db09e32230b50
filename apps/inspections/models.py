from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from apps.core.models import SyncableModel, generate_local_id


class Product(SyncableModel):
    """Cached copy of a server product, kept for offline use"""

    id = models.CharField(primary_key=True, max_length=64)
    code = models.CharField(max_length=100, db_index=True)
    name = models.CharField(max_length=255)
    template_url = models.URLField(max_length=1000, blank=True, default="")

    class Meta:
        db_table = "cached_products"
        ordering = ["code"]

    def __str__(self):
        return f"{self.code} ({self.name})"


class Workstation(SyncableModel):
    id = models.CharField(primary_key=True, max_length=64)
    name = models.CharField(max_length=255)

    class Meta:
        db_table = "cached_workstations"
        ordering = ["name"]

    def __str__(self):
        return self.name


class DefectType(SyncableModel):
    id = models.CharField(primary_key=True, max_length=64)
    code = models.CharField(max_length=100)
    name = models.CharField(max_length=255)
    color = models.CharField(max_length=20, blank=True, default="")

    class Meta:
        db_table = "cached_defect_types"
        ordering = ["code"]

    def __str__(self):
        return f"{self.code} ({self.name})"


class LocalSession(SyncableModel):
    class Status(models.TextChoices):
        OPEN = "OPEN", "Open"
        PAUSED = "PAUSED", "Paused"
        CLOSED = "CLOSED", "Closed"

    local_id = models.CharField(primary_key=True, max_length=64, default=generate_local_id)
    server_id = models.CharField(max_length=64, null=True, blank=True, db_index=True)

    # server references
    product_id = models.CharField(max_length=64)
    workstation_id = models.CharField(max_length=64)
    user_id = models.CharField(max_length=64)

    status = models.CharField(max_length=10, choices=Status.choices, default=Status.OPEN)
    active_time = models.PositiveIntegerField(default=0)  # seconds
    is_deleted = models.BooleanField(default=False)

    started_at = models.DateTimeField(auto_now_add=True)
    ended_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = "local_sessions"
        ordering = ["-started_at"]
        indexes = [
            models.Index(fields=["status", "sync_status"], name="local_sess_status_sync_idx"),
        ]

    def __str__(self):
        return f"Session {self.local_id} ({self.status})"


class LocalItem(SyncableModel):
    class Status(models.TextChoices):
        OK = "OK", "OK"
        DEFECTIVE = "DEFECTIVE", "Defective"

    local_id = models.CharField(primary_key=True, max_length=64, default=generate_local_id)
    server_id = models.CharField(max_length=64, null=True, blank=True, db_index=True)

    session = models.ForeignKey(LocalSession, related_name="items", on_delete=models.CASCADE)
    session_server_id = models.CharField(max_length=64, null=True, blank=True)

    sequence = models.PositiveIntegerField()
    status = models.CharField(max_length=10, choices=Status.choices, default=Status.OK)
    is_deleted = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "local_items"
        ordering = ["session", "sequence"]
        constraints = [
            models.UniqueConstraint(fields=["session", "sequence"], name="unique_item_sequence_per_session"),
        ]

    def __str__(self):
        return f"Item #{self.sequence} of session {self.session_id}"


class LocalDefect(SyncableModel):
    local_id = models.CharField(primary_key=True, max_length=64, default=generate_local_id)
    server_id = models.CharField(max_length=64, null=True, blank=True, db_index=True)

    item = models.ForeignKey(LocalItem, related_name="defects", on_delete=models.CASCADE)
    item_server_id = models.CharField(max_length=64, null=True, blank=True)

    defect_type_id = models.CharField(max_length=64)
    # normalized canvas position
    position_x = models.FloatField(validators=[MinValueValidator(0.0), MaxValueValidator(1.0)])
    position_y = models.FloatField(validators=[MinValueValidator(0.0), MaxValueValidator(1.0)])
    severity = models.CharField(max_length=20, null=True, blank=True)
    notes = models.TextField(null=True, blank=True)
    is_deleted = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "local_defects"
        ordering = ["created_at"]

    def __str__(self):
        return f"Defect {self.local_id} on item {self.item_id}"


def clear_all_data():
    """Wipe every local collection, including the pending queue"""
    from apps.sync.models import IdentityMapping, SyncOperation

    counts = {}
    for model in (LocalDefect, LocalItem, LocalSession, Product, Workstation, DefectType, SyncOperation, IdentityMapping):
        deleted, _ = model.objects.all().delete()
        counts[model._meta.db_table] = deleted
    return counts
