from django.db import models

from apps.core.models import BaseModel
from apps.organization_requests.models import RequestStatus


class ApplicationType(models.TextChoices):
    INDEPENDENT = 'INDEPENDENT', 'Independent'
    SIMPLE = 'SIMPLE', 'Simple'
    STANDALONE = 'STANDALONE', 'Standalone'


class ApplicationStatus(models.TextChoices):
    ACTIVE = 'ACTIVE', 'Active'
    DISABLED = 'DISABLED', 'Disabled'


class OrganizationApplicationStatus(models.TextChoices):
    ACTIVE = 'ACTIVE', 'Active'
    RESTRICTED = 'RESTRICTED', 'Restricted'
    PENDING = 'PENDING', 'Pending'


class Application(BaseModel):
    """A third-party application NGOs can get access to through the hub."""
    name = models.CharField(max_length=100, unique=True)
    type = models.CharField(max_length=20, choices=ApplicationType.choices)
    status = models.CharField(max_length=20, choices=ApplicationStatus.choices, default=ApplicationStatus.ACTIVE)
    login_link = models.URLField(blank=True, null=True)
    website = models.URLField()
    short_description = models.CharField(max_length=200)
    description = models.TextField()
    steps = models.JSONField(default=list, blank=True, help_text="Onboarding steps shown to organizations")
    logo = models.CharField(max_length=500, blank=True, null=True, help_text="Storage key of the logo")

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


class OrganizationApplication(BaseModel):
    """An organization's access to an application."""
    organization = models.ForeignKey(
        'organizations.Organization', on_delete=models.CASCADE, related_name='organization_applications',
    )
    application = models.ForeignKey(Application, on_delete=models.CASCADE, related_name='organization_applications')
    status = models.CharField(
        max_length=20,
        choices=OrganizationApplicationStatus.choices,
        default=OrganizationApplicationStatus.ACTIVE,
    )

    class Meta:
        unique_together = ['organization', 'application']

    def __str__(self):
        return f"{self.application} @ {self.organization_id} ({self.status})"


class ApplicationRequest(BaseModel):
    """An organization asking for access to an application."""
    organization = models.ForeignKey(
        'organizations.Organization', on_delete=models.CASCADE, related_name='application_requests',
    )
    application = models.ForeignKey(Application, on_delete=models.CASCADE, related_name='requests')
    status = models.CharField(max_length=20, choices=RequestStatus.choices, default=RequestStatus.PENDING)

    class Meta:
        ordering = ['-created_at']
