"""
HB Sync Store - Relational Sync Claims
========================================
SyncClaimRecord is the durable form of core.sync.models.SyncClaim.

The unique constraint on the token columns is what makes first-time
claims race-safe: two concurrent INSERTs, one IntegrityError.
"""

from __future__ import annotations

from django.db import models


class ClaimRecordStatus(models.TextChoices):
    RUNNING = "RUNNING", "Running"
    SUCCEEDED = "SUCCEEDED", "Succeeded"
    FAILED = "FAILED", "Failed"


class SyncClaimRecord(models.Model):
    location_id = models.CharField(max_length=64)
    business_day = models.DateField()
    provider_id = models.CharField(max_length=64)
    status = models.CharField(
        max_length=16,
        choices=ClaimRecordStatus.choices,
        default=ClaimRecordStatus.RUNNING,
    )
    owner_id = models.CharField(max_length=64)
    attempts = models.PositiveIntegerField(default=1)
    claimed_at = models.DateTimeField()
    completed_at = models.DateTimeField(null=True, blank=True)
    last_error = models.TextField(null=True, blank=True)

    class Meta:
        db_table = "hb_sync_claims"
        ordering = ["location_id", "business_day", "provider_id"]
        indexes = [
            models.Index(fields=["status", "claimed_at"], name="idx_sync_claim_status"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["location_id", "business_day", "provider_id"],
                name="uq_sync_claim_token",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.location_id}|{self.business_day}|{self.provider_id}:{self.status}"
