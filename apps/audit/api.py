from datetime import date
from typing import List, Optional
from uuid import UUID

from django.shortcuts import get_object_or_404
from ninja import Router

from apps.identity.decorators import has_permission
from apps.identity.permissions import Permissions
from .dtos import AuditLogOut
from .models import AuditLog

router = Router(tags=["Audit"])

MAX_LIMIT = 500


def _serialize_log(log: AuditLog) -> dict:
    performer = log.performed_by
    return {
        "id": log.id,
        "org_id": log.org_id,
        "action": log.action,
        "target_type": log.target_type,
        "target_id": log.target_id,
        "target_label": log.target_label,
        "performed_by_name": (performer.name or performer.username) if performer else None,
        "performed_at": log.performed_at,
        "context": log.context,
    }


@router.get("/logs", response=List[AuditLogOut], auth=None)
@has_permission(Permissions.AUDIT_VIEW)
def list_audit_logs(
    request,
    org_id: Optional[UUID] = None,
    action: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    limit: int = 100,
):
    """
    Audit trail, newest first. Filter by organization, action and date
    range; at most 500 entries are returned.
    """
    qs = AuditLog.objects.select_related("performed_by")

    if org_id:
        qs = qs.filter(org_id=org_id)
    if action:
        qs = qs.filter(action=action)
    if start_date:
        qs = qs.filter(performed_at__date__gte=start_date)
    if end_date:
        qs = qs.filter(performed_at__date__lte=end_date)

    qs = qs[:max(1, min(limit, MAX_LIMIT))]
    return [_serialize_log(log) for log in qs]


@router.get("/logs/{log_id}", response=AuditLogOut, auth=None)
@has_permission(Permissions.AUDIT_VIEW)
def get_audit_log(request, log_id: UUID):
    log = get_object_or_404(AuditLog.objects.select_related("performed_by"), id=log_id)
    return _serialize_log(log)
