import apps.core.models
import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="DefectType",
            fields=[
                ("sync_status", models.CharField(choices=[("synced", "Synced"), ("pending", "Pending"), ("error", "Error")], db_index=True, default="pending", max_length=10)),
                ("last_modified", models.DateTimeField(auto_now=True)),
                ("id", models.CharField(max_length=64, primary_key=True, serialize=False)),
                ("code", models.CharField(max_length=100)),
                ("name", models.CharField(max_length=255)),
                ("color", models.CharField(blank=True, default="", max_length=20)),
            ],
            options={
                "db_table": "cached_defect_types",
                "ordering": ["code"],
            },
        ),
        migrations.CreateModel(
            name="Product",
            fields=[
                ("sync_status", models.CharField(choices=[("synced", "Synced"), ("pending", "Pending"), ("error", "Error")], db_index=True, default="pending", max_length=10)),
                ("last_modified", models.DateTimeField(auto_now=True)),
                ("id", models.CharField(max_length=64, primary_key=True, serialize=False)),
                ("code", models.CharField(db_index=True, max_length=100)),
                ("name", models.CharField(max_length=255)),
                ("template_url", models.URLField(blank=True, default="", max_length=1000)),
            ],
            options={
                "db_table": "cached_products",
                "ordering": ["code"],
            },
        ),
        migrations.CreateModel(
            name="Workstation",
            fields=[
                ("sync_status", models.CharField(choices=[("synced", "Synced"), ("pending", "Pending"), ("error", "Error")], db_index=True, default="pending", max_length=10)),
                ("last_modified", models.DateTimeField(auto_now=True)),
                ("id", models.CharField(max_length=64, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255)),
            ],
            options={
                "db_table": "cached_workstations",
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="LocalSession",
            fields=[
                ("sync_status", models.CharField(choices=[("synced", "Synced"), ("pending", "Pending"), ("error", "Error")], db_index=True, default="pending", max_length=10)),
                ("last_modified", models.DateTimeField(auto_now=True)),
                ("local_id", models.CharField(default=apps.core.models.generate_local_id, max_length=64, primary_key=True, serialize=False)),
                ("server_id", models.CharField(blank=True, db_index=True, max_length=64, null=True)),
                ("product_id", models.CharField(max_length=64)),
                ("workstation_id", models.CharField(max_length=64)),
                ("user_id", models.CharField(max_length=64)),
                ("status", models.CharField(choices=[("OPEN", "Open"), ("PAUSED", "Paused"), ("CLOSED", "Closed")], default="OPEN", max_length=10)),
                ("active_time", models.PositiveIntegerField(default=0)),
                ("is_deleted", models.BooleanField(default=False)),
                ("started_at", models.DateTimeField(auto_now_add=True)),
                ("ended_at", models.DateTimeField(blank=True, null=True)),
            ],
            options={
                "db_table": "local_sessions",
                "ordering": ["-started_at"],
                "indexes": [models.Index(fields=["status", "sync_status"], name="local_sess_status_sync_idx")],
            },
        ),
        migrations.CreateModel(
            name="LocalItem",
            fields=[
                ("sync_status", models.CharField(choices=[("synced", "Synced"), ("pending", "Pending"), ("error", "Error")], db_index=True, default="pending", max_length=10)),
                ("last_modified", models.DateTimeField(auto_now=True)),
                ("local_id", models.CharField(default=apps.core.models.generate_local_id, max_length=64, primary_key=True, serialize=False)),
                ("server_id", models.CharField(blank=True, db_index=True, max_length=64, null=True)),
                ("session_server_id", models.CharField(blank=True, max_length=64, null=True)),
                ("sequence", models.PositiveIntegerField()),
                ("status", models.CharField(choices=[("OK", "OK"), ("DEFECTIVE", "Defective")], default="OK", max_length=10)),
                ("is_deleted", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("session", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="items", to="inspections.localsession")),
            ],
            options={
                "db_table": "local_items",
                "ordering": ["session", "sequence"],
                "constraints": [models.UniqueConstraint(fields=("session", "sequence"), name="unique_item_sequence_per_session")],
            },
        ),
        migrations.CreateModel(
            name="LocalDefect",
            fields=[
                ("sync_status", models.CharField(choices=[("synced", "Synced"), ("pending", "Pending"), ("error", "Error")], db_index=True, default="pending", max_length=10)),
                ("last_modified", models.DateTimeField(auto_now=True)),
                ("local_id", models.CharField(default=apps.core.models.generate_local_id, max_length=64, primary_key=True, serialize=False)),
                ("server_id", models.CharField(blank=True, db_index=True, max_length=64, null=True)),
                ("item_server_id", models.CharField(blank=True, max_length=64, null=True)),
                ("defect_type_id", models.CharField(max_length=64)),
                (
                    "position_x",
                    models.FloatField(validators=[django.core.validators.MinValueValidator(0.0), django.core.validators.MaxValueValidator(1.0)]),
                ),
                (
                    "position_y",
                    models.FloatField(validators=[django.core.validators.MinValueValidator(0.0), django.core.validators.MaxValueValidator(1.0)]),
                ),
                ("severity", models.CharField(blank=True, max_length=20, null=True)),
                ("notes", models.TextField(blank=True, null=True)),
                ("is_deleted", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("item", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="defects", to="inspections.localitem")),
            ],
            options={
                "db_table": "local_defects",
                "ordering": ["created_at"],
            },
        ),
    ]
