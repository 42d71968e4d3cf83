import uuid
from django.db import models
from django.contrib.auth.models import AbstractUser


class UserRole(models.TextChoices):
    SUPER_ADMIN = 'SUPER_ADMIN', 'Super Administrator'
    ADMIN = 'ADMIN', 'Administrator'
    EMPLOYEE = 'EMPLOYEE', 'Employee'


class UserStatus(models.TextChoices):
    ACTIVE = 'ACTIVE', 'Active'
    RESTRICTED = 'RESTRICTED', 'Restricted'


class User(AbstractUser):
    """
    Hub user. Organization users carry the id of their NGO; super
    administrators have none.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    # Store org_id as UUID field (no FK to maintain app independence)
    org_id = models.UUIDField(null=True, blank=True, db_index=True)
    name = models.CharField(max_length=100, blank=True)
    role = models.CharField(
        max_length=20,
        choices=UserRole.choices,
        default=UserRole.EMPLOYEE
    )
    status = models.CharField(
        max_length=20,
        choices=UserStatus.choices,
        default=UserStatus.ACTIVE
    )
    phone = models.CharField(max_length=20, blank=True)

    class Meta:
        ordering = ['username']

    def __str__(self):
        return self.email or self.username
