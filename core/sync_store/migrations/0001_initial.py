from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="SyncClaimRecord",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("location_id", models.CharField(max_length=64)),
                ("business_day", models.DateField()),
                ("provider_id", models.CharField(max_length=64)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("RUNNING", "Running"),
                            ("SUCCEEDED", "Succeeded"),
                            ("FAILED", "Failed"),
                        ],
                        default="RUNNING",
                        max_length=16,
                    ),
                ),
                ("owner_id", models.CharField(max_length=64)),
                ("attempts", models.PositiveIntegerField(default=1)),
                ("claimed_at", models.DateTimeField()),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                ("last_error", models.TextField(blank=True, null=True)),
            ],
            options={
                "db_table": "hb_sync_claims",
                "ordering": ["location_id", "business_day", "provider_id"],
                "indexes": [
                    models.Index(
                        fields=["status", "claimed_at"],
                        name="idx_sync_claim_status",
                    ),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("location_id", "business_day", "provider_id"),
                        name="uq_sync_claim_token",
                    ),
                ],
            },
        ),
    ]
