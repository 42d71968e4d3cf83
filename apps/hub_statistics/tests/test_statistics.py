"""
Tests for the dashboard statistics.
"""
from datetime import date, timedelta
from unittest.mock import MagicMock

from django.test import Client, TestCase
from django.utils import timezone

from apps.applications.models import Application, ApplicationType, OrganizationApplication
from apps.core.exceptions import InternalServerError
from apps.identity.models import UserRole
from apps.organizations.models import Organization, OrganizationStatus
from apps.organizations.tests.factories import create_organization, make_service, make_user
from apps.organization_requests.models import OrganizationRequest, RequestStatus
from apps.hub_statistics.dtos import StatisticsType
from apps.hub_statistics.services import StatisticsService, window_buckets


class WindowTest(TestCase):

    def test_daily_window(self):
        buckets = window_buckets(StatisticsType.DAILY, today=date(2025, 3, 10))
        self.assertEqual(len(buckets), 30)
        self.assertEqual(buckets[0], date(2025, 2, 9))
        self.assertEqual(buckets[-1], date(2025, 3, 10))

    def test_monthly_window_crosses_year(self):
        buckets = window_buckets(StatisticsType.MONTHLY, today=date(2025, 3, 10))
        self.assertEqual(len(buckets), 12)
        self.assertEqual(buckets[0], date(2024, 4, 1))
        self.assertEqual(buckets[-1], date(2025, 3, 1))

    def test_yearly_window(self):
        buckets = window_buckets(StatisticsType.YEARLY, today=date(2025, 3, 10))
        self.assertEqual(buckets, [date(year, 1, 1) for year in range(2021, 2026)])


class StatisticsServiceTest(TestCase):

    def setUp(self):
        self.organization_service = make_service()
        self.service = StatisticsService(organization_service=self.organization_service)

    def _request(self, status):
        return OrganizationRequest.objects.create(
            name="Elena", email=f"{status.lower()}@ngo.ro", phone="+40733444555",
            organization_name="Asociatia", status=status,
        )

    def test_request_statistics_buckets_today(self):
        self._request(RequestStatus.APPROVED)
        self._request(RequestStatus.APPROVED)
        self._request(RequestStatus.DECLINED)
        self._request(RequestStatus.PENDING)

        result = self.service.get_organization_request_statistics(StatisticsType.DAILY)

        self.assertEqual(len(result['labels']), 30)
        self.assertEqual(result['labels'][-1], timezone.localdate().strftime('%d %b'))
        self.assertEqual(result['approved'][-1], 2)
        self.assertEqual(result['declined'][-1], 1)
        self.assertEqual(sum(result['approved']), 2)

    def test_old_rows_fall_outside_the_window(self):
        request = self._request(RequestStatus.APPROVED)
        OrganizationRequest.objects.filter(id=request.id).update(updated_at=timezone.now() - timedelta(days=60))

        result = self.service.get_organization_request_statistics(StatisticsType.DAILY)
        self.assertEqual(sum(result['approved']), 0)

        result = self.service.get_organization_request_statistics(StatisticsType.YEARLY)
        self.assertEqual(sum(result['approved']), 1)

    def test_status_statistics(self):
        active = create_organization(self.organization_service, suffix="1")
        restricted = create_organization(self.organization_service, suffix="2")
        create_organization(self.organization_service, suffix="3")
        self.organization_service.activate(active.id)
        self.organization_service.restrict(restricted.id)

        result = self.service.get_organization_status_statistics(StatisticsType.MONTHLY)

        self.assertEqual(result['labels'][-1], timezone.localdate().strftime('%b %Y'))
        self.assertEqual(result['active'][-1], 1)
        self.assertEqual(result['restricted'][-1], 1)

    def test_hub_statistics(self):
        first = create_organization(self.organization_service, suffix="1")
        second = create_organization(self.organization_service, suffix="2")
        pending = create_organization(self.organization_service, suffix="3")
        self.organization_service.activate(first.id)
        self.organization_service.activate(second.id)

        make_user(role=UserRole.ADMIN, org_id=first.id)
        make_user(role=UserRole.EMPLOYEE, org_id=first.id)
        make_user(role=UserRole.EMPLOYEE, org_id=second.id)
        make_user(role=UserRole.ADMIN, org_id=pending.id)
        make_user(role=UserRole.SUPER_ADMIN)
        Application.objects.create(
            name="Vot", type=ApplicationType.INDEPENDENT, website="https://vot.ro",
            short_description="Vot", description="Vot",
        )

        result = self.service.get_all_organizations_statistics()

        self.assertEqual(result['numberOfActiveOrganizations'], 2)
        self.assertEqual(result['numberOfUpdatedOrganizations'], 0)
        self.assertEqual(result['numberOfUsers'], 3)
        self.assertEqual(result['meanNumberOfUsers'], 2)
        self.assertEqual(result['numberOfApps'], 1)

    def test_hub_statistics_without_organizations(self):
        result = self.service.get_all_organizations_statistics()
        self.assertEqual(result['meanNumberOfUsers'], 0)

    def test_organization_statistics(self):
        organization = create_organization(self.organization_service)
        make_user(role=UserRole.EMPLOYEE, org_id=organization.id)
        make_user(role=UserRole.ADMIN, org_id=organization.id)
        application = Application.objects.create(
            name="Vot", type=ApplicationType.SIMPLE, login_link="https://vot.ro/login",
            website="https://vot.ro", short_description="Vot", description="Vot",
        )
        OrganizationApplication.objects.create(organization=organization, application=application)

        result = self.service.get_organization_statistics(organization.id)

        self.assertEqual(result['organizationCreatedOn'], Organization.objects.get(id=organization.id).created_at)
        self.assertIsNotNone(result['organizationSyncedOn'])
        self.assertEqual(result['numberOfInstalledApps'], 1)
        self.assertEqual(result['numberOfUsers'], 1)
        # fresh rows: income/expense plus report, partner and investor
        self.assertEqual(result['numberOfErroredFinancialReports'], 2)
        self.assertEqual(result['numberOfErroredReportsInvestorsPartners'], 3)
        self.assertEqual(result['hubStatistics'], {'numberOfActiveOrganizations': 0, 'numberOfApplications': 1})

    def test_failures_are_wrapped(self):
        organization_service = MagicMock()
        organization_service.count_organizations.side_effect = RuntimeError("db down")
        service = StatisticsService(organization_service=organization_service)

        with self.assertRaises(InternalServerError) as ctx:
            service.get_all_organizations_statistics()
        self.assertEqual(ctx.exception.error_code, "STATISTICS_003")


class StatisticsApiTest(TestCase):

    def setUp(self):
        self.client = Client()
        self.organization = create_organization()

    def test_hub_statistics_are_super_admin_only(self):
        self.client.force_login(make_user(role=UserRole.EMPLOYEE, org_id=self.organization.id))
        self.assertEqual(self.client.get("/api/statistics/organizations").status_code, 403)

        self.client.force_login(make_user(role=UserRole.SUPER_ADMIN))
        response = self.client.get("/api/statistics/organizations")
        self.assertEqual(response.status_code, 200)
        self.assertIn('meanNumberOfUsers', response.json())

    def test_request_statistics_type(self):
        self.client.force_login(make_user(role=UserRole.SUPER_ADMIN))

        response = self.client.get("/api/statistics/organization-request?type=yearly")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.json()['labels']), 5)

        response = self.client.get("/api/statistics/organization-request?type=weekly")
        self.assertEqual(response.status_code, 422)

    def test_employee_reads_own_organization(self):
        self.client.force_login(make_user(role=UserRole.EMPLOYEE, org_id=self.organization.id))

        response = self.client.get(f"/api/statistics/organization/{self.organization.id}")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['numberOfUsers'], 1)

        other = create_organization(suffix="2")
        response = self.client.get(f"/api/statistics/organization/{other.id}")
        self.assertEqual(response.status_code, 403)
