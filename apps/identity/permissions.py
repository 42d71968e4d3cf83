from typing import List, Dict
from .models import UserRole, User, UserStatus


class Permissions:
    # Organizations
    ORGANIZATION_VIEW = "organization.view"
    ORGANIZATION_MANAGE = "organization.manage"
    # Lifecycle actions on any organization (activate, restrict, delete...)
    ORGANIZATION_ADMINISTER = "organization.administer"

    # Organization registration requests
    ORGANIZATION_REQUEST_MANAGE = "organization_request.manage"

    # Applications
    APPLICATION_VIEW = "application.view"
    APPLICATION_MANAGE = "application.manage"
    APPLICATION_REQUEST = "application.request"

    # Statistics
    STATISTICS_VIEW_ALL = "statistics.view_all"
    STATISTICS_VIEW_ORGANIZATION = "statistics.view_organization"

    # Audit
    AUDIT_VIEW = "audit.view"


# Static Role -> Permission Mapping
ROLE_PERMISSIONS: Dict[str, List[str]] = {
    UserRole.SUPER_ADMIN: [
        Permissions.ORGANIZATION_VIEW,
        Permissions.ORGANIZATION_MANAGE,
        Permissions.ORGANIZATION_ADMINISTER,
        Permissions.ORGANIZATION_REQUEST_MANAGE,
        Permissions.APPLICATION_VIEW,
        Permissions.APPLICATION_MANAGE,
        Permissions.STATISTICS_VIEW_ALL,
        Permissions.STATISTICS_VIEW_ORGANIZATION,
        Permissions.AUDIT_VIEW,
    ],
    UserRole.ADMIN: [
        Permissions.ORGANIZATION_VIEW,
        Permissions.ORGANIZATION_MANAGE,
        Permissions.APPLICATION_VIEW,
        Permissions.APPLICATION_REQUEST,
        Permissions.STATISTICS_VIEW_ORGANIZATION,
    ],
    UserRole.EMPLOYEE: [
        Permissions.ORGANIZATION_VIEW,
        Permissions.APPLICATION_VIEW,
        Permissions.STATISTICS_VIEW_ORGANIZATION,
    ],
}


def get_user_permissions(user: User) -> List[str]:
    """
    Returns a list of permission strings for the given user based on their role.
    Restricted users get none.
    """
    if not user or not user.is_active:
        return []
    if user.status == UserStatus.RESTRICTED:
        return []

    return ROLE_PERMISSIONS.get(user.role, [])


def can_access_organization(user: User, organization_id) -> bool:
    """Super admins reach every organization, everyone else only their own."""
    if Permissions.ORGANIZATION_ADMINISTER in get_user_permissions(user):
        return True
    return user.org_id is not None and str(user.org_id) == str(organization_id)
