from uuid import UUID

from django.http import HttpRequest
from ninja import Router

from apps.identity.decorators import has_permission, require_organization_access
from apps.identity.permissions import Permissions
from .dtos import (
    HubStatisticsOut, OrganizationStatisticsOut, RequestStatisticsOut,
    StatisticsType, StatusStatisticsOut,
)
from .services import StatisticsService

router = Router(tags=["Statistics"])

statistics_service = StatisticsService()


@router.get("/organization-request", response=RequestStatisticsOut, auth=None)
@has_permission(Permissions.STATISTICS_VIEW_ALL)
def organization_request_statistics(request: HttpRequest, type: StatisticsType = StatisticsType.MONTHLY):
    return statistics_service.get_organization_request_statistics(type)


@router.get("/organization-status", response=StatusStatisticsOut, auth=None)
@has_permission(Permissions.STATISTICS_VIEW_ALL)
def organization_status_statistics(request: HttpRequest, type: StatisticsType = StatisticsType.MONTHLY):
    return statistics_service.get_organization_status_statistics(type)


@router.get("/organizations", response=HubStatisticsOut, auth=None)
@has_permission(Permissions.STATISTICS_VIEW_ALL)
def all_organizations_statistics(request: HttpRequest):
    return statistics_service.get_all_organizations_statistics()


@router.get("/organization/{organization_id}", response=OrganizationStatisticsOut, auth=None)
@has_permission(Permissions.STATISTICS_VIEW_ORGANIZATION)
def organization_statistics(request: HttpRequest, organization_id: UUID):
    require_organization_access(request, organization_id)
    return statistics_service.get_organization_statistics(organization_id)
