from django.contrib import admin
from .models import SyncOperation, IdentityMapping


@admin.register(SyncOperation)
class SyncOperationAdmin(admin.ModelAdmin):
    list_display = ["id", "kind", "entity_kind", "local_id", "attempts", "created_at"]
    list_filter = ["kind", "entity_kind"]
    search_fields = ["local_id", "server_id", "last_error"]
    readonly_fields = ["created_at"]


@admin.register(IdentityMapping)
class IdentityMappingAdmin(admin.ModelAdmin):
    list_display = ["entity_kind", "local_id", "server_id", "bound_at"]
    list_filter = ["entity_kind"]
    search_fields = ["local_id", "server_id"]
    readonly_fields = ["bound_at"]
