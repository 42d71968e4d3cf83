from django.db import models

from apps.core.models import BaseModel


class RequestStatus(models.TextChoices):
    PENDING = 'PENDING', 'Pending'
    APPROVED = 'APPROVED', 'Approved'
    DECLINED = 'DECLINED', 'Declined'


class OrganizationRequest(BaseModel):
    """
    Registration of a new organization, filed publicly by its future
    administrator and decided by a super admin.
    """
    name = models.CharField(max_length=100, help_text="Full name of the prospective admin")
    email = models.EmailField(db_index=True)
    phone = models.CharField(max_length=20)
    organization_name = models.CharField(max_length=255)

    organization = models.ForeignKey(
        'organizations.Organization',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='requests',
    )
    status = models.CharField(max_length=20, choices=RequestStatus.choices, default=RequestStatus.PENDING)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.organization_name} ({self.status})"
