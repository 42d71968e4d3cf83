"""
Centralized audit logging service.

Use log_action() to record organization lifecycle mutations. It never
raises: a logging failure is reported through the module logger and the
calling request carries on.

Usage:
    from apps.audit.audit_service import log_action, AuditAction

    log_action(
        org_id=organization.id,
        action=AuditAction.RESTRICT_ORGANIZATION,
        target_type="Organization",
        target_id=organization.id,
        target_label=organization.organization_general.name,
        performed_by=request.user,
    )
"""
import logging
from uuid import UUID
from typing import Optional

from django.db import transaction

from .models import AuditLog

logger = logging.getLogger(__name__)


class AuditAction:
    """
    Canonical string constants for audit log actions.
    """
    # ── Organizations ─────────────────────────────────────────────────
    CREATE_ORGANIZATION = "CREATE_ORGANIZATION"
    ACTIVATE_ORGANIZATION = "ACTIVATE_ORGANIZATION"
    RESTRICT_ORGANIZATION = "RESTRICT_ORGANIZATION"
    RESTORE_ORGANIZATION = "RESTORE_ORGANIZATION"
    DELETE_ORGANIZATION = "DELETE_ORGANIZATION"
    NEW_REPORTING_ENTRIES = "NEW_REPORTING_ENTRIES"

    # ── Organization requests ─────────────────────────────────────────
    APPROVE_ORGANIZATION_REQUEST = "APPROVE_ORGANIZATION_REQUEST"
    REJECT_ORGANIZATION_REQUEST = "REJECT_ORGANIZATION_REQUEST"

    # ── Applications ──────────────────────────────────────────────────
    APPROVE_APPLICATION_REQUEST = "APPROVE_APPLICATION_REQUEST"
    REJECT_APPLICATION_REQUEST = "REJECT_APPLICATION_REQUEST"
    RESTRICT_APPLICATION = "RESTRICT_APPLICATION"
    RESTORE_APPLICATION = "RESTORE_APPLICATION"


def log_action(
    *,
    org_id: UUID,
    action: str,
    target_type: str,
    target_id: UUID,
    performed_by=None,
    target_label: str = "",
    context: Optional[dict] = None,
) -> Optional[AuditLog]:
    """
    Create an AuditLog entry.

    Args:
        org_id:        Organization the action belongs to.
        action:        Action constant from AuditAction.
        target_type:   Type of the object acted on (e.g. "Organization").
        target_id:     Primary key of the object acted on.
        performed_by:  Django User instance or None (system jobs, anonymous).
        target_label:  Optional human-readable description of the object.
        context:       Optional dict of additional metadata stored as JSON.

    Returns:
        The created AuditLog instance, or None if creation failed.
    """
    if performed_by is not None and not getattr(performed_by, 'is_authenticated', False):
        performed_by = None

    try:
        with transaction.atomic():
            return AuditLog.objects.create(
                org_id=org_id,
                action=action,
                target_type=target_type,
                target_id=target_id,
                target_label=target_label[:255],
                performed_by=performed_by,
                context=context or {},
            )
    except Exception as e:
        logger.warning(f"Could not record audit action {action} on {target_type} {target_id}: {e}")
        return None
