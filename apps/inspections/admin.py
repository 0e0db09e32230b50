from django.contrib import admin
from .models import Product, Workstation, DefectType, LocalSession, LocalItem, LocalDefect


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ["code", "name", "last_modified"]
    search_fields = ["code", "name"]
    readonly_fields = ["id", "last_modified"]


@admin.register(Workstation)
class WorkstationAdmin(admin.ModelAdmin):
    list_display = ["name", "last_modified"]
    readonly_fields = ["id", "last_modified"]


@admin.register(DefectType)
class DefectTypeAdmin(admin.ModelAdmin):
    list_display = ["code", "name", "color", "last_modified"]
    readonly_fields = ["id", "last_modified"]


@admin.register(LocalSession)
class LocalSessionAdmin(admin.ModelAdmin):
    list_display = ["local_id", "server_id", "status", "sync_status", "started_at"]
    list_filter = ["status", "sync_status", "is_deleted"]
    search_fields = ["local_id", "server_id"]
    readonly_fields = ["local_id", "server_id", "started_at", "last_modified"]


@admin.register(LocalItem)
class LocalItemAdmin(admin.ModelAdmin):
    list_display = ["local_id", "session", "sequence", "status", "sync_status"]
    list_filter = ["status", "sync_status"]
    readonly_fields = ["local_id", "server_id", "session_server_id", "created_at", "last_modified"]


@admin.register(LocalDefect)
class LocalDefectAdmin(admin.ModelAdmin):
    list_display = ["local_id", "item", "defect_type_id", "sync_status", "created_at"]
    list_filter = ["sync_status"]
    readonly_fields = ["local_id", "server_id", "item_server_id", "created_at", "last_modified"]
