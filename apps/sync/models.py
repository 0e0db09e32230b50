from django.db import models
from django.utils import timezone


class OperationKind(models.TextChoices):
    CREATE = "CREATE", "Create"
    UPDATE = "UPDATE", "Update"
    DELETE = "DELETE", "Delete"


class EntityKind(models.TextChoices):
    SESSION = "session", "Session"
    ITEM = "item", "Item"
    DEFECT = "defect", "Defect"


class SyncOperation(models.Model):
    """Pending mutation waiting to be replayed against the central API"""

    kind = models.CharField(max_length=10, choices=OperationKind.choices)
    entity_kind = models.CharField(max_length=10, choices=EntityKind.choices, db_index=True)
    local_id = models.CharField(max_length=64, db_index=True)
    server_id = models.CharField(max_length=64, null=True, blank=True)
    payload = models.JSONField(default=dict, blank=True)  # data needed to replay
    created_at = models.DateTimeField(default=timezone.now, db_index=True)
    attempts = models.PositiveIntegerField(default=0)
    last_error = models.TextField(null=True, blank=True)

    class Meta:
        db_table = "sync_queue"
        ordering = ["created_at", "id"]

    def __str__(self):
        return f"{self.kind} {self.entity_kind} {self.local_id} (attempts={self.attempts})"


class IdentityMapping(models.Model):
    """Binding of a client-generated identifier to the one assigned by the server"""

    entity_kind = models.CharField(max_length=10, choices=EntityKind.choices)
    local_id = models.CharField(max_length=64)
    server_id = models.CharField(max_length=64)
    bound_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "identity_mappings"
        constraints = [
            models.UniqueConstraint(fields=["entity_kind", "local_id"], name="unique_identity_per_entity"),
        ]

    def __str__(self):
        return f"{self.entity_kind} {self.local_id} -> {self.server_id}"
