import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="SyncOperation",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("kind", models.CharField(choices=[("CREATE", "Create"), ("UPDATE", "Update"), ("DELETE", "Delete")], max_length=10)),
                ("entity_kind", models.CharField(choices=[("session", "Session"), ("item", "Item"), ("defect", "Defect")], db_index=True, max_length=10)),
                ("local_id", models.CharField(db_index=True, max_length=64)),
                ("server_id", models.CharField(blank=True, max_length=64, null=True)),
                ("payload", models.JSONField(blank=True, default=dict)),
                ("created_at", models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ("attempts", models.PositiveIntegerField(default=0)),
                ("last_error", models.TextField(blank=True, null=True)),
            ],
            options={
                "db_table": "sync_queue",
                "ordering": ["created_at", "id"],
            },
        ),
        migrations.CreateModel(
            name="IdentityMapping",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("entity_kind", models.CharField(choices=[("session", "Session"), ("item", "Item"), ("defect", "Defect")], max_length=10)),
                ("local_id", models.CharField(max_length=64)),
                ("server_id", models.CharField(max_length=64)),
                ("bound_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "identity_mappings",
                "constraints": [models.UniqueConstraint(fields=("entity_kind", "local_id"), name="unique_identity_per_entity")],
            },
        ),
    ]
