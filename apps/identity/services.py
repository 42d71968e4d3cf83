"""Services for Identity app."""
import logging
from typing import List, Optional

from django.utils.crypto import get_random_string

from .models import User, UserRole, UserStatus
from .dtos import UserDTO
from .permissions import get_user_permissions

logger = logging.getLogger(__name__)


def to_user_dto(user: User) -> UserDTO:
    return UserDTO(
        id=user.id,
        username=user.username,
        email=user.email,
        name=user.name,
        role=user.role,
        status=user.status,
        org_id=user.org_id,
        permissions=get_user_permissions(user),
    )


def get_user_dto(user_id) -> Optional[UserDTO]:
    user = User.objects.filter(id=user_id).first()
    return to_user_dto(user) if user else None


def create_organization_admin(organization_id, name: str, email: str, phone: str = "") -> User:
    """
    Create the ADMIN account of a newly approved organization. The
    password is random; the admin sets their own through the reset flow.
    """
    user = User.objects.create_user(
        username=email,
        email=email,
        password=get_random_string(32),
        name=name,
        phone=phone or "",
        role=UserRole.ADMIN,
        status=UserStatus.ACTIVE,
        org_id=organization_id,
    )
    logger.info(f"Created ADMIN user {user.id} for organization {organization_id}")
    return user


def find_organization_admins(organization_id) -> List[User]:
    return list(User.objects.filter(
        org_id=organization_id, role=UserRole.ADMIN, is_active=True,
    ))


def count_users(organization_ids=None, role: Optional[str] = None) -> int:
    """Users that are ACTIVE or RESTRICTED, optionally scoped."""
    qs = User.objects.filter(
        status__in=[UserStatus.ACTIVE, UserStatus.RESTRICTED],
        role__in=[UserRole.ADMIN, UserRole.EMPLOYEE],
    )
    if organization_ids is not None:
        qs = qs.filter(org_id__in=organization_ids)
    if role:
        qs = qs.filter(role=role)
    return qs.count()


def find_super_admin_emails() -> List[str]:
    return [email for email in User.objects.filter(
        role=UserRole.SUPER_ADMIN, is_active=True,
    ).values_list('email', flat=True) if email]
