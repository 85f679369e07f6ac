"""Base abstract models for the products service.

Provides:
- ``BaseModel``: integer primary key + created_at / updated_at timestamps.
- ``AvailabilityModel``: Extends BaseModel with soft-delete via an
  ``available`` flag.

Design decisions:
- Single ``available`` boolean is the source of truth for visibility;
  there is no ``deleted_at`` column.
- ``objects`` manager returns ALL records (unfiltered).  Use
  ``.available()`` explicitly to exclude soft-deleted rows.
- ``save()`` guard ensures ``updated_at`` is included when ``update_fields``
  is specified (Django skips ``auto_now`` fields otherwise).
"""

from __future__ import annotations

from django.db import models

# ---------------------------------------------------------------------------
# BaseModel
# ---------------------------------------------------------------------------


class BaseModel(models.Model):
    """Abstract base with auto-increment PK and timestamp bookkeeping."""

    id = models.BigAutoField(primary_key=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True

    def save(self, *args, **kwargs) -> None:
        """Ensure ``updated_at`` is refreshed even when ``update_fields`` is passed."""
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "updated_at" not in update_fields:
            kwargs["update_fields"] = list(update_fields) + ["updated_at"]
        super().save(*args, **kwargs)


# ---------------------------------------------------------------------------
# Soft Delete infrastructure
# ---------------------------------------------------------------------------


class AvailabilityQuerySet(models.QuerySet):
    """QuerySet with soft-delete helpers."""

    def available(self) -> AvailabilityQuerySet:
        """Return only records visible to callers."""
        return self.filter(available=True)

    def unavailable(self) -> AvailabilityQuerySet:
        """Return only soft-deleted records."""
        return self.filter(available=False)


class AvailabilityManager(models.Manager):
    """Manager that exposes ``.available()`` / ``.unavailable()`` on the queryset."""

    def get_queryset(self) -> AvailabilityQuerySet:
        return AvailabilityQuerySet(self.model, using=self._db)

    def available(self) -> AvailabilityQuerySet:
        return self.get_queryset().available()

    def unavailable(self) -> AvailabilityQuerySet:
        return self.get_queryset().unavailable()


class AvailabilityModel(BaseModel):
    """Abstract model with soft-delete via an ``available`` flag.

    - ``objects`` is **unfiltered** (returns all rows).
    - Use ``Model.objects.available()`` to exclude soft-deleted rows.
    - ``mark_unavailable()`` performs the soft-delete; ``hard_delete()``
      removes physically and is not used by any service.
    """

    available = models.BooleanField(default=True, db_index=True)

    objects = AvailabilityManager()

    class Meta:
        abstract = True

    def mark_unavailable(self) -> None:
        """Soft-delete this instance (no-op if already unavailable)."""
        if not self.available:
            return
        self.available = False
        self.save(update_fields=["available"])

    def hard_delete(self, using=None, keep_parents=False) -> tuple[int, dict[str, int]]:
        """Permanently remove this record from the database."""
        return super().delete(using=using, keep_parents=keep_parents)
