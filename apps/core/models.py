import uuid
from django.db import models
from django.utils import timezone


class ActiveManager(models.Manager):
    """Hides soft-deleted rows."""

    def get_queryset(self):
        return super().get_queryset().filter(deleted_on__isnull=True)


class BaseModel(models.Model):
    """
    Common columns for every ONG Hub entity.

    Rows are soft-deleted by stamping `deleted_on`; physical removal only
    happens through the explicit organization deletion transaction.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    deleted_on = models.DateTimeField(null=True, blank=True)

    objects = models.Manager()
    active = ActiveManager()

    class Meta:
        abstract = True

    def soft_delete(self):
        self.deleted_on = timezone.now()
        self.save(update_fields=['deleted_on', 'updated_at'])
