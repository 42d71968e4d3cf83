"""
Read-only aggregations behind the dashboards.

Time series are bucketed in the current timezone over a fixed window
ending today: 30 days, 12 months or 5 years. Every bucket is present
in the result, empty ones with a count of 0.
"""
import logging
import math
from datetime import date, datetime, time, timedelta
from typing import Dict, List, Optional, Tuple

from django.db.models import Count
from django.db.models.functions import Trunc
from django.utils import timezone

from apps.applications.services import ApplicationService
from apps.core.exceptions import InternalServerError
from apps.identity.models import UserRole
from apps.identity.services import count_users
from apps.organizations.financial_service import OrganizationFinancialService
from apps.organizations.models import Organization, OrganizationStatus
from apps.organizations.report_service import OrganizationReportService
from apps.organizations.services import OrganizationService
from apps.organization_requests.models import OrganizationRequest, RequestStatus
from .dtos import StatisticsType
from .errors import STATISTICS_ERRORS

logger = logging.getLogger(__name__)

# type -> (number of buckets, Trunc kind, label format)
WINDOWS = {
    StatisticsType.DAILY: (30, 'day', '%d %b'),
    StatisticsType.MONTHLY: (12, 'month', '%b %Y'),
    StatisticsType.YEARLY: (5, 'year', '%Y'),
}


def _shift_months(day: date, months: int) -> date:
    index = day.year * 12 + (day.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def window_buckets(statistics_type: StatisticsType, today: Optional[date] = None) -> List[date]:
    """Start date of every bucket in the window, oldest first."""
    today = today or timezone.localdate()
    size, kind, _ = WINDOWS[statistics_type]
    if kind == 'day':
        return [today - timedelta(days=offset) for offset in range(size - 1, -1, -1)]
    if kind == 'month':
        return [_shift_months(today, -offset) for offset in range(size - 1, -1, -1)]
    return [date(today.year - offset, 1, 1) for offset in range(size - 1, -1, -1)]


def bucket_counts(queryset, statistics_type: StatisticsType, today: Optional[date] = None) -> Tuple[List[str], List[int]]:
    """Labels and per-bucket row counts of `queryset`, bucketed on updated_at."""
    _, kind, label_format = WINDOWS[statistics_type]
    buckets = window_buckets(statistics_type, today)
    start = timezone.make_aware(datetime.combine(buckets[0], time.min))

    rows = (
        queryset.filter(updated_at__gte=start)
        .annotate(period=Trunc('updated_at', kind))
        .values('period')
        .annotate(total=Count('id'))
    )
    totals: Dict[date, int] = {}
    for row in rows:
        period = row['period']
        if isinstance(period, datetime):
            period = timezone.localtime(period).date() if timezone.is_aware(period) else period.date()
        totals[period] = totals.get(period, 0) + row['total']

    labels = [bucket.strftime(label_format) for bucket in buckets]
    return labels, [totals.get(bucket, 0) for bucket in buckets]


class StatisticsService:

    def __init__(
        self,
        organization_service: Optional[OrganizationService] = None,
        application_service: Optional[ApplicationService] = None,
        financial_service: Optional[OrganizationFinancialService] = None,
        report_service: Optional[OrganizationReportService] = None,
    ):
        self.organization_service = organization_service or OrganizationService()
        self.application_service = application_service or ApplicationService()
        self.financial_service = financial_service or OrganizationFinancialService()
        self.report_service = report_service or OrganizationReportService()

    def get_organization_request_statistics(self, statistics_type: StatisticsType) -> dict:
        try:
            labels, approved = bucket_counts(
                OrganizationRequest.objects.filter(status=RequestStatus.APPROVED), statistics_type,
            )
            _, declined = bucket_counts(
                OrganizationRequest.objects.filter(status=RequestStatus.DECLINED), statistics_type,
            )
            return {'labels': labels, 'approved': approved, 'declined': declined}
        except Exception as e:
            logger.exception(f"Request statistics failed: {e}")
            raise InternalServerError.from_catalog(STATISTICS_ERRORS['REQUEST_STATISTICS']) from e

    def get_organization_status_statistics(self, statistics_type: StatisticsType) -> dict:
        try:
            labels, active = bucket_counts(
                Organization.objects.filter(status=OrganizationStatus.ACTIVE), statistics_type,
            )
            _, restricted = bucket_counts(
                Organization.objects.filter(status=OrganizationStatus.RESTRICTED), statistics_type,
            )
            return {'labels': labels, 'active': active, 'restricted': restricted}
        except Exception as e:
            logger.exception(f"Organization status statistics failed: {e}")
            raise InternalServerError.from_catalog(STATISTICS_ERRORS['ORGANIZATION_STATUS_STATISTICS']) from e

    def get_all_organizations_statistics(self) -> dict:
        try:
            active_organizations = self.organization_service.count_organizations(OrganizationStatus.ACTIVE)
            active_ids = Organization.objects.filter(status=OrganizationStatus.ACTIVE).values_list('id', flat=True)
            users = count_users(organization_ids=list(active_ids))

            return {
                'numberOfActiveOrganizations': active_organizations,
                'numberOfUpdatedOrganizations': self.organization_service.count_organizations_with_updated_reports(),
                'numberOfPendingRequests': OrganizationRequest.objects.filter(status=RequestStatus.PENDING).count(),
                'numberOfUsers': users,
                'meanNumberOfUsers': math.ceil(users / active_organizations) if users and active_organizations else 0,
                'numberOfApps': self.application_service.count_active_applications(),
            }
        except Exception as e:
            logger.exception(f"Hub statistics failed: {e}")
            raise InternalServerError.from_catalog(STATISTICS_ERRORS['HUB_STATISTICS']) from e

    def get_organization_statistics(self, organization_id) -> dict:
        """
        Dashboard of one organization. Employees and admins see the same
        installed-app count: access is granted per organization.
        """
        try:
            organization = self.organization_service.find(organization_id)
            return {
                'organizationCreatedOn': organization.created_at,
                'organizationSyncedOn': self.organization_service.get_financial_and_reports_last_updated_on(organization_id),
                'numberOfInstalledApps': self.application_service.count_active_for_organization(organization_id),
                'numberOfUsers': count_users(organization_ids=[organization_id], role=UserRole.EMPLOYEE),
                'numberOfErroredFinancialReports': self.financial_service.count_not_completed_reports(organization_id),
                'numberOfErroredReportsInvestorsPartners': self.report_service.count_not_completed_reports(organization_id),
                'hubStatistics': self._general_hub_statistics(),
            }
        except Exception as e:
            logger.exception(f"Statistics for organization {organization_id} failed: {e}")
            raise InternalServerError.from_catalog(STATISTICS_ERRORS['ORGANIZATION_STATISTICS']) from e

    def _general_hub_statistics(self) -> dict:
        return {
            'numberOfActiveOrganizations': self.organization_service.count_organizations(OrganizationStatus.ACTIVE),
            'numberOfApplications': self.application_service.count_active_applications(),
        }
