"""
Tests for the organization aggregate.

Covers:
1. Report status table and completion status derivation
2. Activity and director rules at creation
3. End-to-end creation with ANAF seeding (best-effort and required)
4. Section updates (activity scope, directors) and financial/report
   updates driving the completion status
5. Status transitions, restriction mail, transactional delete
6. Yearly reporting cycle and the ANAF refetch batch
"""
from decimal import Decimal

from django.core import mail
from django.core.files.uploadedfile import SimpleUploadedFile
from django.db import DatabaseError, connection
from django.test import TestCase, TransactionTestCase
from django.utils import timezone

from apps.audit.models import AuditLog
from apps.core.anaf_service import AnafError
from apps.core.exceptions import BadRequestError, InternalServerError
from apps.identity.models import UserRole
from apps.nomenclatures.models import Region
from apps.organizations.activity_service import validate_activity
from apps.organizations.dtos import (
    ActivitySection, FinancialSection, GeneralSection, LegalSection, ReportSection,
    ValidateGeneralIn,
)
from apps.organizations.financial_service import (
    OrganizationFinancialService, determine_report_status, sum_financial_data,
)
from apps.organizations.models import (
    CompletionStatus, Contact, FinancialReportStatus, FinancialType, Organization,
    OrganizationFinancial, OrganizationGeneral, OrganizationStatus,
)
from apps.organizations.services import OrganizationService, compute_completion_status

from .factories import (
    CITY_ID, anaf_indicators, create_organization, create_payload, fake_anaf,
    make_service, make_user,
)


def csv_file(name):
    return SimpleUploadedFile(name, b"a,b", content_type="text/csv")


class ReportStatusTest(TestCase):

    def test_status_table(self):
        cases = [
            (None, Decimal('100'), True, FinancialReportStatus.NOT_COMPLETED),
            (None, Decimal('100'), False, FinancialReportStatus.NOT_COMPLETED),
            (Decimal('100'), Decimal('100'), True, FinancialReportStatus.COMPLETED),
            (Decimal('90'), Decimal('100'), True, FinancialReportStatus.INVALID),
            (Decimal('0'), Decimal('100'), True, FinancialReportStatus.INVALID),
            (Decimal('50'), Decimal('0'), False, FinancialReportStatus.PENDING),
            (Decimal('0'), Decimal('0'), False, FinancialReportStatus.NOT_COMPLETED),
        ]
        for entered, registry, synced, expected in cases:
            with self.subTest(entered=entered, registry=registry, synced=synced):
                self.assertEqual(determine_report_status(entered, registry, synced), expected)

    def test_sum_ignores_non_numeric_values(self):
        self.assertEqual(sum_financial_data({'a': 10, 'b': '2.5', 'c': None, 'd': 'n/a', 'e': True}), Decimal('12.5'))
        self.assertEqual(sum_financial_data(None), Decimal('0'))


class CompletionStatusTest(TestCase):

    def test_all_completed(self):
        done = [CompletionStatus.COMPLETED]
        self.assertEqual(compute_completion_status(done, done, done, done), CompletionStatus.COMPLETED)

    def test_any_group_not_completed(self):
        done = [CompletionStatus.COMPLETED]
        mixed = [CompletionStatus.COMPLETED, CompletionStatus.NOT_COMPLETED]
        for position in range(4):
            groups = [done] * 4
            groups[position] = mixed
            with self.subTest(position=position):
                self.assertEqual(compute_completion_status(*groups), CompletionStatus.NOT_COMPLETED)

    def test_empty_groups_are_completed(self):
        self.assertEqual(compute_completion_status([], [], [], []), CompletionStatus.COMPLETED)


class CreateOrganizationTest(TestCase):

    def setUp(self):
        self.anaf = fake_anaf(anaf_indicators(income=1000, expense=800, employees=4))
        self.service = make_service(anaf=self.anaf)

    def test_creates_pending_organization_with_children(self):
        organization = self.service.create(create_payload())
        year = timezone.now().year - 1

        self.assertEqual(organization.status, OrganizationStatus.PENDING)
        self.assertEqual(organization.completion_status, CompletionStatus.NOT_COMPLETED)
        self.assertEqual(organization.organization_general.phone, "+40722000001")
        self.assertEqual(list(organization.organization_activity.cities.values_list('id', flat=True)), [CITY_ID])
        self.assertEqual(organization.organization_legal.directors.count(), 3)

        rows = {row.type: row for row in organization.organization_financial.all()}
        self.assertEqual(set(rows), {FinancialType.INCOME, FinancialType.EXPENSE})
        self.assertEqual(rows[FinancialType.INCOME].total, Decimal('1000'))
        self.assertEqual(rows[FinancialType.EXPENSE].total, Decimal('800'))
        self.assertTrue(all(row.year == year and row.synched_anaf for row in rows.values()))
        self.assertTrue(all(row.number_of_employees == 4 for row in rows.values()))

        report = organization.organization_report
        self.assertEqual(report.reports.get().year, year)
        self.assertEqual(report.partners.get().year, year)
        self.assertEqual(report.investors.get().year, year)

        self.anaf.get_financial_information.assert_called_once_with("RO12341", year)
        self.assertTrue(AuditLog.objects.filter(org_id=organization.id, action="CREATE_ORGANIZATION").exists())

    def test_anaf_failure_seeds_empty_rows(self):
        service = make_service(anaf=fake_anaf(error=AnafError("timeout")))
        organization = service.create(create_payload())

        rows = list(organization.organization_financial.all())
        self.assertEqual(len(rows), 2)
        self.assertTrue(all(row.total == 0 and not row.synched_anaf for row in rows))

    def test_anaf_failure_aborts_when_required(self):
        service = make_service(anaf=fake_anaf(error=AnafError("timeout")), anaf_required_on_create=True)

        with self.assertRaises(InternalServerError) as ctx:
            service.create(create_payload())
        self.assertEqual(ctx.exception.error_code, "ANAF001")
        self.assertFalse(Organization.objects.exists())

    def test_incomplete_anaf_indicators_seed_unsynced_rows(self):
        service = make_service(anaf=fake_anaf([{'indicator': 'I38', 'val_indicator': 10}]))
        organization = service.create(create_payload())
        self.assertFalse(organization.organization_financial.filter(synched_anaf=True).exists())

    def test_malformed_anaf_indicators_seed_unsynced_rows(self):
        for index, income in enumerate(["n/a", "NaN", [1]]):
            with self.subTest(income=income):
                indicators = anaf_indicators()
                indicators[0]['val_indicator'] = income
                service = make_service(anaf=fake_anaf(indicators))
                organization = service.create(create_payload(suffix=str(index)))

                rows = list(organization.organization_financial.all())
                self.assertEqual(len(rows), 2)
                self.assertTrue(all(row.total == 0 and not row.synched_anaf for row in rows))

    def test_two_directors_are_rejected(self):
        with self.assertRaises(BadRequestError) as ctx:
            self.service.create(create_payload(directors=2))
        self.assertEqual(ctx.exception.error_code, "ORG008")
        self.assertFalse(OrganizationGeneral.objects.exists())

    def test_activity_area_rules(self):
        cases = [
            ({'area': 'LOCAL', 'cities': []}, "ORG003"),
            ({'area': 'REGIONAL', 'cities': []}, "ORG002"),
            ({'is_part_of_federation': True}, "ORG004"),
            ({'is_part_of_coalition': True}, "ORG005"),
            ({'has_branches': True}, "ORG006"),
            ({'is_part_of_international_organization': True}, "ORG007"),
        ]
        for activity, code in cases:
            with self.subTest(code=code):
                with self.assertRaises(BadRequestError) as ctx:
                    self.service.create(create_payload(**activity))
                self.assertEqual(ctx.exception.error_code, code)

    def test_blank_membership_names_are_rejected(self):
        cases = [
            ({'is_part_of_federation': True, 'new_federations': [" ", ""]}, "ORG004"),
            ({'is_part_of_coalition': True, 'new_coalitions': ["  "]}, "ORG005"),
            ({'is_part_of_international_organization': True, 'international_organization_name': "   "}, "ORG007"),
        ]
        for activity, code in cases:
            with self.subTest(code=code):
                with self.assertRaises(BadRequestError) as ctx:
                    validate_activity(activity)
                self.assertEqual(ctx.exception.error_code, code)

    def test_national_area_clears_cities(self):
        organization = self.service.create(create_payload(area='NATIONAL'))
        self.assertEqual(organization.organization_activity.cities.count(), 0)

    def test_new_federations_are_created_once(self):
        organization = self.service.create(create_payload(
            is_part_of_federation=True, new_federations=["FONSS", "fonss", " "],
        ))
        names = list(organization.organization_activity.federations.values_list('name', flat=True))
        self.assertEqual(names, ["FONSS"])

    def test_logo_is_uploaded_under_organization_id(self):
        logo = SimpleUploadedFile("logo.png", b"png", content_type="image/png")
        organization = self.service.create(create_payload(), logo=logo)

        general = organization.organization_general
        self.assertEqual(general.logo, f"{organization.id}/logo/logo.png")
        self.assertEqual(general.logo_url, f"https://files.test/{organization.id}/logo/logo.png")

    def test_validate_general_reports_taken_fields(self):
        self.service.create(create_payload())

        errors = self.service.validate_organization_general(ValidateGeneralIn(
            name="asociatia test 1", phone="0722000001", cui="RO99999",
        ))
        self.assertEqual(sorted(error.field for error in errors), ["name", "phone"])


class UpdateOrganizationTest(TestCase):

    def setUp(self):
        self.service = make_service()
        self.organization = create_organization(self.service)

    def _complete_financials(self):
        for row in self.organization.organization_financial.all():
            half = row.total / 2
            self.service.update(self.organization.id, FinancialSection.model_validate({
                'section': 'financial',
                'financial': {'id': str(row.id), 'data': {'salaries': str(half), 'other': str(half)}},
            }))

    def test_financial_update_matching_anaf_total(self):
        self._complete_financials()

        for row in OrganizationFinancial.objects.filter(organization=self.organization):
            self.assertEqual(row.status, CompletionStatus.COMPLETED)
            self.assertEqual(row.report_status, FinancialReportStatus.COMPLETED)

        self.organization.refresh_from_db()
        self.assertEqual(self.organization.completion_status, CompletionStatus.NOT_COMPLETED)

    def test_financial_update_with_wrong_total_is_invalid(self):
        row = self.organization.organization_financial.first()
        financial = self.service.update(self.organization.id, FinancialSection.model_validate({
            'section': 'financial', 'financial': {'id': str(row.id), 'data': {'salaries': 1}},
        }))
        self.assertEqual(financial.status, CompletionStatus.NOT_COMPLETED)
        self.assertEqual(financial.report_status, FinancialReportStatus.INVALID)

    def test_everything_completed_marks_organization_completed(self):
        self._complete_financials()
        organization_report = self.organization.organization_report
        self.service.update(self.organization.id, ReportSection.model_validate({
            'section': 'report',
            'report': {'report_id': str(organization_report.reports.get().id), 'report': "https://ngo.ro/raport"},
        }))
        self.service.upload_partners(self.organization.id, organization_report.partners.get().id, 5, csv_file("p.csv"))
        self.service.upload_investors(self.organization.id, organization_report.investors.get().id, 2, csv_file("i.csv"))

        self.organization.refresh_from_db()
        self.assertEqual(self.organization.completion_status, CompletionStatus.COMPLETED)

        self.service.delete_partner(self.organization.id, organization_report.partners.get().id)
        self.organization.refresh_from_db()
        self.assertEqual(self.organization.completion_status, CompletionStatus.NOT_COMPLETED)

    def test_general_update_merges_fields_and_contact(self):
        general = self.service.update(self.organization.id, GeneralSection.model_validate({
            'section': 'general',
            'general': {'short_description': "Despre noi", 'contact': {'full_name': "Ana Pop"}},
        }))
        self.assertEqual(general.short_description, "Despre noi")
        self.assertEqual(general.contact.full_name, "Ana Pop")
        self.assertEqual(general.contact.email, "maria1@ngo.ro")
        self.assertEqual(general.name, "Asociatia Test 1")


class SectionUpdateTest(TestCase):

    def setUp(self):
        self.service = make_service()
        self.organization = create_organization(
            self.service,
            is_part_of_federation=True, new_federations=["FONSS"],
            is_part_of_coalition=True, new_coalitions=["Coalitia pentru Educatie"],
            has_branches=True, branches=[CITY_ID],
            is_part_of_international_organization=True, international_organization_name="Caritas",
        )

    def _update_activity(self, **activity):
        return self.service.update(self.organization.id, ActivitySection.model_validate({
            'section': 'activity', 'activity': activity,
        }))

    def test_regional_area_keeps_regions_and_drops_cities(self):
        region = Region.objects.create(name="Nord-Vest")

        activity = self._update_activity(area='REGIONAL', regions=[region.id], cities=[])

        self.assertEqual(activity.area, 'REGIONAL')
        self.assertEqual(list(activity.regions.all()), [region])
        self.assertEqual(activity.cities.count(), 0)

    def test_membership_flags_off_clear_their_lists(self):
        activity = self.organization.organization_activity
        self.assertEqual(activity.federations.count(), 1)
        self.assertEqual(activity.coalitions.count(), 1)
        self.assertEqual(activity.branches.count(), 1)

        activity = self._update_activity(is_part_of_federation=False, is_part_of_coalition=False, has_branches=False)

        self.assertFalse(activity.is_part_of_federation)
        self.assertFalse(activity.is_part_of_coalition)
        self.assertFalse(activity.has_branches)
        self.assertEqual(activity.federations.count(), 0)
        self.assertEqual(activity.coalitions.count(), 0)
        self.assertEqual(activity.branches.count(), 0)

    def test_international_flag_off_clears_name(self):
        self.assertEqual(self.organization.organization_activity.international_organization_name, "Caritas")

        activity = self._update_activity(is_part_of_international_organization=False)

        self.assertFalse(activity.is_part_of_international_organization)
        self.assertIsNone(activity.international_organization_name)

    def test_directors_are_merged_created_and_soft_deleted(self):
        kept, renamed, dropped = self.organization.organization_legal.directors.order_by('full_name')

        legal = self.service.update(self.organization.id, LegalSection.model_validate({
            'section': 'legal',
            'legal': {'directors': [
                {'id': str(kept.id), 'full_name': kept.full_name},
                {'id': str(renamed.id), 'full_name': "Elena Marin", 'email': "elena@ngo.ro"},
                {'full_name': "Director Nou"},
            ]},
        }))

        self.assertEqual(
            sorted(legal.directors.values_list('full_name', flat=True)),
            ["Director 0", "Director Nou", "Elena Marin"],
        )
        renamed.refresh_from_db()
        self.assertEqual(renamed.email, "elena@ngo.ro")
        self.assertTrue(legal.directors.filter(id=renamed.id).exists())
        dropped.refresh_from_db()
        self.assertIsNotNone(dropped.deleted_on)
        self.assertFalse(legal.directors.filter(id=dropped.id).exists())
        self.assertEqual(legal.legal_representative.full_name, "Ion Popescu")


class StatusTransitionTest(TestCase):

    def setUp(self):
        self.service = make_service()
        self.organization = create_organization(self.service)

    def test_activate_twice_fails(self):
        self.service.activate(self.organization.id)
        with self.assertRaises(BadRequestError) as ctx:
            self.service.activate(self.organization.id)
        self.assertEqual(ctx.exception.error_code, "ORG012")

    def test_restrict_emails_admins(self):
        admin = make_user(role=UserRole.ADMIN, org_id=self.organization.id)
        make_user(role=UserRole.EMPLOYEE, org_id=self.organization.id)
        self.service.activate(self.organization.id)

        self.service.restrict(self.organization.id)

        self.organization.refresh_from_db()
        self.assertEqual(self.organization.status, OrganizationStatus.RESTRICTED)
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, [admin.email])
        self.assertIn("Asociatia Test 1", mail.outbox[0].subject)

    def test_restrict_twice_fails(self):
        self.service.restrict(self.organization.id)
        with self.assertRaises(BadRequestError) as ctx:
            self.service.restrict(self.organization.id)
        self.assertEqual(ctx.exception.error_code, "ORG013")

    def test_restore_only_from_restricted(self):
        with self.assertRaises(BadRequestError):
            self.service.restore(self.organization.id)

        self.service.restrict(self.organization.id)
        self.service.restore(self.organization.id)
        self.organization.refresh_from_db()
        self.assertEqual(self.organization.status, OrganizationStatus.ACTIVE)

    def test_delete_pending_organization(self):
        self.service.delete(self.organization.id)

        self.assertFalse(Organization.objects.exists())
        self.assertFalse(OrganizationGeneral.objects.exists())
        self.assertFalse(OrganizationFinancial.objects.exists())
        self.assertFalse(Contact.objects.exists())

    def test_delete_active_organization_fails(self):
        self.service.activate(self.organization.id)
        with self.assertRaises(BadRequestError) as ctx:
            self.service.delete(self.organization.id)
        self.assertEqual(ctx.exception.error_code, "ORG015")


class FailingDirectorsDeleteService(OrganizationService):

    def _delete_rows(self, label, queryset):
        if label == 'directors':
            raise DatabaseError("directors table locked")
        return super()._delete_rows(label, queryset)


class DeleteRollbackTest(TransactionTestCase):

    def test_failed_step_rolls_back_everything(self):
        organization = create_organization(make_service())
        service = FailingDirectorsDeleteService(
            financial_service=OrganizationFinancialService(fake_anaf(anaf_indicators())),
            file_manager=make_service().file_manager,
        )

        with self.assertRaises(InternalServerError) as ctx:
            service.delete(organization.id)

        self.assertEqual(ctx.exception.error_code, "ORG016")
        self.assertFalse(connection.in_atomic_block)
        self.assertTrue(Organization.objects.filter(id=organization.id).exists())
        self.assertEqual(OrganizationFinancial.objects.filter(organization_id=organization.id).count(), 2)
        # general contact, legal representative and three directors
        self.assertEqual(Contact.objects.count(), 5)


class ReportingCycleTest(TestCase):

    def setUp(self):
        self.service = make_service()
        self.organization = create_organization(self.service)

    def test_new_year_adds_entries(self):
        year = timezone.now().year
        self.service.create_new_reporting_entries(self.organization.id, year=year)

        self.organization.refresh_from_db()
        self.assertIsNotNone(self.organization.synced_on)
        self.assertEqual(self.organization.organization_financial.filter(year=year).count(), 2)
        self.assertEqual(self.organization.organization_report.reports.filter(year=year).count(), 1)

    def test_existing_year_is_refused(self):
        with self.assertRaises(BadRequestError) as ctx:
            self.service.create_new_reporting_entries(self.organization.id)
        self.assertEqual(ctx.exception.error_code, "ORG017")

    def test_anaf_failure_surfaces(self):
        service = make_service(anaf=fake_anaf(error=AnafError("down")))
        with self.assertRaises(InternalServerError) as ctx:
            service.create_new_reporting_entries(self.organization.id, year=timezone.now().year)
        self.assertEqual(ctx.exception.error_code, "ANAF001")

    def test_batch_only_touches_active_organizations(self):
        other = create_organization(self.service, suffix="2")
        self.service.activate(other.id)

        result = self.service.create_reporting_entries_for_active_organizations(timezone.now().year)

        self.assertEqual(result, {'created': 1, 'failed': 0})
        self.assertFalse(self.organization.organization_financial.filter(year=timezone.now().year).exists())


class RefetchAnafTest(TestCase):

    def test_one_failing_organization_does_not_stop_the_batch(self):
        service = make_service(anaf=fake_anaf(None))
        first = create_organization(service, suffix="1")
        second = create_organization(service, suffix="2")
        service.activate(first.id)
        service.activate(second.id)

        def registry(cui, year):
            if cui == "RO12341":
                raise AnafError("timeout")
            return anaf_indicators(income=500, expense=300, employees=2)

        anaf = fake_anaf()
        anaf.get_financial_information.side_effect = registry
        result = OrganizationFinancialService(anaf).refetch_anaf_data_for_financial_reports()

        self.assertEqual(result, {'updated': 2, 'failed': 1})
        self.assertFalse(first.organization_financial.filter(synched_anaf=True).exists())
        income = second.organization_financial.get(type=FinancialType.INCOME)
        self.assertTrue(income.synched_anaf)
        self.assertEqual(income.total, Decimal('500'))
        self.assertEqual(income.report_status, FinancialReportStatus.NOT_COMPLETED)

    def test_synced_years_are_left_alone(self):
        service = make_service(anaf=fake_anaf(None))
        organization = create_organization(service)
        service.activate(organization.id)
        last_year = timezone.now().year - 1
        older = OrganizationFinancial.objects.create(
            organization=organization, type=FinancialType.INCOME, year=last_year - 1,
            total=Decimal('42'), synched_anaf=True, report_status=FinancialReportStatus.COMPLETED,
        )

        anaf = fake_anaf(anaf_indicators(income=500, expense=300, employees=2))
        result = OrganizationFinancialService(anaf).refetch_anaf_data_for_financial_reports()

        self.assertEqual(result, {'updated': 2, 'failed': 0})
        anaf.get_financial_information.assert_called_once_with("RO12341", last_year)
        older.refresh_from_db()
        self.assertEqual(older.total, Decimal('42'))
        self.assertEqual(older.report_status, FinancialReportStatus.COMPLETED)


class RefetchTransactionTest(TransactionTestCase):

    def test_registry_is_called_outside_a_transaction(self):
        service = make_service(anaf=fake_anaf(None))
        organization = create_organization(service)
        service.activate(organization.id)

        in_atomic = []

        def registry(cui, year):
            in_atomic.append(connection.in_atomic_block)
            return anaf_indicators(income=500, expense=300, employees=2)

        anaf = fake_anaf()
        anaf.get_financial_information.side_effect = registry
        result = OrganizationFinancialService(anaf).refetch_anaf_data_for_financial_reports()

        self.assertEqual(in_atomic, [False])
        self.assertEqual(result, {'updated': 2, 'failed': 0})
        self.assertEqual(organization.organization_financial.filter(synched_anaf=True).count(), 2)
