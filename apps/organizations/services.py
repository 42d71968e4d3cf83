"""
Organization service: orchestrates the organization aggregate.

Creation, retrieval, sectioned updates, activation/restriction, the
transactional delete, the yearly reporting cycle and the derived
completion status. Child rows are owned by the sub-services; this
module only sequences them.
"""
import logging
from typing import Iterable, List, Optional, Tuple

from django.conf import settings
from django.core.files.uploadedfile import UploadedFile
from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import Max, Prefetch, QuerySet
from django.utils import timezone

from apps.audit.audit_service import AuditAction, log_action
from apps.core.anaf_service import AnafError
from apps.core.exceptions import BadRequestError, InternalServerError, NotFoundError
from apps.core.file_manager_service import FileManagerService, FileUploadError
from apps.core.mail_service import MailService
from apps.identity.services import find_organization_admins
from .activity_service import OrganizationActivityService, validate_activity
from .dtos import (
    ActivitySection, FinancialSection, GeneralSection, LegalSection,
    OrganizationCreateIn, ReportSection, ValidateGeneralIn, ValidationErrorDTO,
)
from .errors import ORGANIZATION_ERRORS, ORGANIZATION_VALIDATION_ERRORS
from .financial_service import OrganizationFinancialService
from .general_service import OrganizationGeneralService, normalize_phone
from .legal_service import OrganizationLegalService, validate_directors
from .models import (
    CompletionStatus, Contact, Investor, Organization, OrganizationActivity,
    OrganizationFinancial, OrganizationGeneral, OrganizationLegal,
    OrganizationReport, OrganizationStatus, Partner, Report,
)
from .report_service import OrganizationReportService

logger = logging.getLogger(__name__)

RESTRICTED_EMAIL_TEMPLATE = 'emails/organization_restricted.html'

# field on OrganizationGeneral -> validation catalog key
UNIQUE_GENERAL_FIELDS = [
    ('cui', 'CUI'),
    ('raf_number', 'RAF'),
    ('name', 'NAME'),
    ('email', 'EMAIL'),
    ('phone', 'PHONE'),
    ('alias', 'ALIAS'),
]
CASE_INSENSITIVE_FIELDS = {'name', 'alias', 'email'}


def compute_completion_status(*status_groups: Iterable[str]) -> str:
    """COMPLETED unless some row in any group is still NOT_COMPLETED."""
    for statuses in status_groups:
        if any(status == CompletionStatus.NOT_COMPLETED for status in statuses):
            return CompletionStatus.NOT_COMPLETED
    return CompletionStatus.COMPLETED


def previous_year() -> int:
    return timezone.now().year - 1


class OrganizationService:

    def __init__(
        self,
        general_service: Optional[OrganizationGeneralService] = None,
        activity_service: Optional[OrganizationActivityService] = None,
        legal_service: Optional[OrganizationLegalService] = None,
        financial_service: Optional[OrganizationFinancialService] = None,
        report_service: Optional[OrganizationReportService] = None,
        file_manager: Optional[FileManagerService] = None,
        mail_service: Optional[MailService] = None,
        anaf_required_on_create: Optional[bool] = None,
    ):
        self.file_manager = file_manager or FileManagerService()
        self.general_service = general_service or OrganizationGeneralService(self.file_manager)
        self.activity_service = activity_service or OrganizationActivityService()
        self.legal_service = legal_service or OrganizationLegalService(self.file_manager)
        self.financial_service = financial_service or OrganizationFinancialService()
        self.report_service = report_service or OrganizationReportService(self.file_manager)
        self.mail_service = mail_service or MailService()
        if anaf_required_on_create is None:
            anaf_required_on_create = getattr(settings, 'ANAF_REQUIRED_ON_CREATE', False)
        self.anaf_required_on_create = anaf_required_on_create

    # =========================================================================
    # Create
    # =========================================================================

    def create(
        self,
        payload: OrganizationCreateIn,
        logo: Optional[UploadedFile] = None,
        statute: Optional[UploadedFile] = None,
        performed_by=None,
    ) -> Organization:
        """
        Register a PENDING organization with all of its children and the
        financial rows of the previous year. Files are uploaded once the
        rows exist, since their keys are prefixed with the organization id.
        """
        validate_activity(payload.activity.model_dump())
        validate_directors(payload.legal.directors)

        year = previous_year()
        financial_information = self._fetch_creation_financials(payload.general.cui, year)

        try:
            with transaction.atomic():
                general = self.general_service.create(payload.general)
                activity = self.activity_service.create(payload.activity)
                legal = self.legal_service.create(payload.legal)
                organization_report = self.report_service.create(year)

                organization = Organization.objects.create(
                    status=OrganizationStatus.PENDING,
                    completion_status=CompletionStatus.NOT_COMPLETED,
                    organization_general=general,
                    organization_activity=activity,
                    organization_legal=legal,
                    organization_report=organization_report,
                )
                for row in self.financial_service.generate_financial_reports_data(year, financial_information):
                    OrganizationFinancial.objects.create(organization=organization, **row)
        except IntegrityError as e:
            logger.error(f"Could not create organization {payload.general.name}: {e}")
            raise BadRequestError.from_catalog(ORGANIZATION_ERRORS['CREATE']) from e

        if logo:
            general.logo = self.general_service.replace_logo(organization, None, logo)
            general.save(update_fields=['logo', 'updated_at'])
        if statute:
            legal.organization_statute = self.legal_service.replace_statute(organization, None, statute)
            legal.save(update_fields=['organization_statute', 'updated_at'])

        logger.info(f"Organization {organization.id} created ({general.name})")
        log_action(
            org_id=organization.id,
            action=AuditAction.CREATE_ORGANIZATION,
            target_type="Organization",
            target_id=organization.id,
            target_label=general.name,
            performed_by=performed_by,
        )
        return self.find_with_relations(organization.id)

    def _fetch_creation_financials(self, cui: str, year: int):
        try:
            return self.financial_service.get_financial_information_from_anaf(cui, year)
        except AnafError as e:
            if self.anaf_required_on_create:
                logger.error(f"ANAF lookup failed for cui={cui}, aborting creation: {e}")
                raise InternalServerError.from_catalog(ORGANIZATION_ERRORS['ANAF_ERRORED']) from e
            logger.warning(f"ANAF lookup failed for cui={cui}, seeding empty financials: {e}")
            return None

    # =========================================================================
    # Read
    # =========================================================================

    def find(self, organization_id) -> Organization:
        organization = Organization.objects.select_related(
            'organization_general', 'organization_legal', 'organization_activity', 'organization_report',
        ).filter(id=organization_id).first()
        if not organization:
            raise NotFoundError.from_catalog(ORGANIZATION_ERRORS['GET'])
        return organization

    def find_with_relations(self, organization_id) -> Organization:
        """The whole aggregate, with presigned logo and statute URLs."""
        organization = Organization.objects.select_related(
            'organization_general__city__county',
            'organization_general__county',
            'organization_general__organization_city__county',
            'organization_general__organization_county',
            'organization_general__contact',
            'organization_legal__legal_representative',
            'organization_activity',
            'organization_report',
        ).prefetch_related(
            'organization_activity__branches__county',
            'organization_activity__domains',
            'organization_activity__cities__county',
            'organization_activity__federations',
            'organization_activity__coalitions',
            'organization_activity__regions',
            Prefetch('organization_legal__directors', queryset=Contact.active.all()),
            'organization_financial',
            'organization_report__reports',
            'organization_report__partners',
            'organization_report__investors',
        ).filter(id=organization_id).first()
        if not organization:
            raise NotFoundError.from_catalog(ORGANIZATION_ERRORS['GET'])

        general = organization.organization_general
        legal = organization.organization_legal
        general.logo_url = self.file_manager.generate_presigned_url(general.logo)
        legal.organization_statute_url = self.file_manager.generate_presigned_url(legal.organization_statute)
        return organization

    def get_financial(self, organization_id) -> List[OrganizationFinancial]:
        self.find(organization_id)
        return list(OrganizationFinancial.objects.filter(organization_id=organization_id))

    # =========================================================================
    # Sectioned update
    # =========================================================================

    def update(
        self,
        organization_id,
        payload,
        logo: Optional[UploadedFile] = None,
        statute: Optional[UploadedFile] = None,
    ):
        """
        Apply exactly one section. Returns the updated child, or None when
        the payload is not a known section.
        """
        organization = self.find(organization_id)

        if isinstance(payload, GeneralSection):
            return self.general_service.update(organization, payload.general, logo)

        if isinstance(payload, ActivitySection):
            return self.activity_service.update(organization.organization_activity, payload.activity)

        if isinstance(payload, LegalSection):
            return self.legal_service.update(organization, payload.legal, statute)

        if isinstance(payload, FinancialSection):
            financial = self.financial_service.update(payload.financial, organization_id=organization.id)
            self.update_organization_completion_status(organization.id)
            return financial

        if isinstance(payload, ReportSection):
            report = self.report_service.update(organization, payload.report)
            self.update_organization_completion_status(organization.id)
            return report

        return None

    # =========================================================================
    # Partner / investor lists
    # =========================================================================

    def upload_partners(self, organization_id, partner_id, number_of_partners, file: UploadedFile) -> Partner:
        organization = self.find(organization_id)
        partner = self.report_service.upload_partners(organization, partner_id, number_of_partners, file)
        self.update_organization_completion_status(organization.id)
        return partner

    def upload_investors(self, organization_id, investor_id, number_of_investors, file: UploadedFile) -> Investor:
        organization = self.find(organization_id)
        investor = self.report_service.upload_investors(organization, investor_id, number_of_investors, file)
        self.update_organization_completion_status(organization.id)
        return investor

    def delete_partner(self, organization_id, partner_id) -> Partner:
        organization = self.find(organization_id)
        partner = self.report_service.delete_partners(organization, partner_id)
        self.update_organization_completion_status(organization.id)
        return partner

    def delete_investor(self, organization_id, investor_id) -> Investor:
        organization = self.find(organization_id)
        investor = self.report_service.delete_investors(organization, investor_id)
        self.update_organization_completion_status(organization.id)
        return investor

    # =========================================================================
    # Status transitions
    # =========================================================================

    def activate(self, organization_id, performed_by=None) -> Organization:
        organization = self.find(organization_id)
        if organization.status == OrganizationStatus.ACTIVE:
            raise BadRequestError.from_catalog(ORGANIZATION_ERRORS['ACTIVATE'])

        self._set_status(organization, OrganizationStatus.ACTIVE, AuditAction.ACTIVATE_ORGANIZATION, performed_by)
        return organization

    def restrict(self, organization_id, performed_by=None) -> Organization:
        organization = self.find(organization_id)
        if organization.status == OrganizationStatus.RESTRICTED:
            raise BadRequestError.from_catalog(ORGANIZATION_ERRORS['ALREADY_RESTRICTED'])

        self._set_status(organization, OrganizationStatus.RESTRICTED, AuditAction.RESTRICT_ORGANIZATION, performed_by)

        name = organization.organization_general.name
        admins = self.find_admins(organization.id)
        self.mail_service.send_email(
            to=[admin.email for admin in admins],
            subject=f"Organizația {name} a fost restricționată",
            template=RESTRICTED_EMAIL_TEMPLATE,
            context={
                'title': f"Organizația {name} a fost restricționată",
                'subtitle': "Accesul organizației în ONG Hub a fost restricționat de un administrator.",
            },
        )
        return organization

    def restore(self, organization_id, performed_by=None) -> Organization:
        organization = self.find(organization_id)
        if organization.status != OrganizationStatus.RESTRICTED:
            raise BadRequestError.from_catalog(ORGANIZATION_ERRORS['RESTORE'])

        self._set_status(organization, OrganizationStatus.ACTIVE, AuditAction.RESTORE_ORGANIZATION, performed_by)
        return organization

    def _set_status(self, organization: Organization, status: str, action: str, performed_by) -> None:
        previous = organization.status
        organization.status = status
        organization.save(update_fields=['status', 'updated_at'])
        logger.info(f"Organization {organization.id}: {previous} -> {status}")
        log_action(
            org_id=organization.id,
            action=action,
            target_type="Organization",
            target_id=organization.id,
            target_label=organization.organization_general.name,
            performed_by=performed_by,
            context={'from': previous, 'to': status},
        )

    # =========================================================================
    # Delete
    # =========================================================================

    def delete(self, organization_id, performed_by=None) -> None:
        """
        Remove a PENDING organization and every row it owns in a single
        transaction. Any failure rolls the whole plan back.
        """
        organization = self.find(organization_id)
        if organization.status != OrganizationStatus.PENDING:
            raise BadRequestError.from_catalog(ORGANIZATION_ERRORS['DELETE_NOT_PENDING'])

        name = organization.organization_general.name
        file_keys = self._owned_file_keys(organization)
        plan = self._deletion_plan(organization)

        try:
            with transaction.atomic():
                for label, queryset in plan:
                    self._delete_rows(label, queryset)
        except Exception as e:
            logger.exception(f"Deletion of organization {organization.id} rolled back: {e}")
            raise InternalServerError.from_catalog(ORGANIZATION_ERRORS['DELETE']) from e

        self._delete_files(organization.id, file_keys)
        logger.info(f"Organization {organization.id} deleted ({name})")
        log_action(
            org_id=organization.id,
            action=AuditAction.DELETE_ORGANIZATION,
            target_type="Organization",
            target_id=organization.id,
            target_label=name,
            performed_by=performed_by,
        )

    def _deletion_plan(self, organization: Organization) -> List[Tuple[str, QuerySet]]:
        """
        Ordered (label, queryset) pairs. The organization row goes before
        its one-to-one children because it protects them.
        """
        general = organization.organization_general
        legal = organization.organization_legal
        director_ids = list(legal.directors.values_list('id', flat=True))

        return [
            ('financials', OrganizationFinancial.objects.filter(organization_id=organization.id)),
            ('organization', Organization.objects.filter(id=organization.id)),
            ('reports', Report.objects.filter(organization_report_id=organization.organization_report_id)),
            ('partners', Partner.objects.filter(organization_report_id=organization.organization_report_id)),
            ('investors', Investor.objects.filter(organization_report_id=organization.organization_report_id)),
            ('organization_report', OrganizationReport.objects.filter(id=organization.organization_report_id)),
            ('legal_representative', Contact.objects.filter(id=legal.legal_representative_id)),
            ('directors', Contact.objects.filter(id__in=director_ids)),
            ('organization_legal', OrganizationLegal.objects.filter(id=legal.id)),
            ('organization_activity', OrganizationActivity.objects.filter(id=organization.organization_activity_id)),
            ('organization_general', OrganizationGeneral.objects.filter(id=general.id)),
            ('general_contact', Contact.objects.filter(id=general.contact_id)),
        ]

    def _delete_rows(self, label: str, queryset: QuerySet) -> int:
        deleted, _ = queryset.delete()
        logger.debug(f"Deleted {deleted} {label} row(s)")
        return deleted

    def _owned_file_keys(self, organization: Organization) -> List[str]:
        keys = [
            organization.organization_general.logo,
            organization.organization_legal.organization_statute,
        ]
        report_id = organization.organization_report_id
        keys += Partner.objects.filter(organization_report_id=report_id).values_list('path', flat=True)
        keys += Investor.objects.filter(organization_report_id=report_id).values_list('path', flat=True)
        return [key for key in keys if key]

    def _delete_files(self, organization_id, keys: List[str]) -> None:
        if not keys:
            return
        try:
            self.file_manager.delete_files(keys)
        except FileUploadError as e:
            logger.error(f"Organization {organization_id} deleted but its files remain: {e.message}")

    # =========================================================================
    # General uniqueness check
    # =========================================================================

    def validate_organization_general(self, payload: ValidateGeneralIn) -> List[ValidationErrorDTO]:
        """One error per submitted field already taken by another organization."""
        errors = []
        for field, catalog_key in UNIQUE_GENERAL_FIELDS:
            value = getattr(payload, field)
            if not value:
                continue
            if field == 'phone':
                value = normalize_phone(value)

            lookup = f"{field}__iexact" if field in CASE_INSENSITIVE_FIELDS else field
            if OrganizationGeneral.objects.filter(**{lookup: value}).exists():
                entry = ORGANIZATION_VALIDATION_ERRORS[catalog_key]
                errors.append(ValidationErrorDTO(field=field, message=entry['message'], error_code=entry['errorCode']))
        return errors

    # =========================================================================
    # Yearly reporting cycle
    # =========================================================================

    def create_new_reporting_entries(self, organization_id, year: Optional[int] = None, performed_by=None) -> Organization:
        """
        Open the reporting cycle for `year` (default: last year). Refused
        when any financial/report/partner/investor row already exists for it.
        """
        organization = self.find(organization_id)
        year = year or previous_year()

        already_exists = (
            organization.organization_financial.filter(year=year).exists()
            or self.report_service.has_entries_for_year(organization.organization_report, year)
        )
        if already_exists:
            raise BadRequestError.from_catalog(ORGANIZATION_ERRORS['ALREADY_EXIST'])

        cui = organization.organization_general.cui
        try:
            rows = self.financial_service.generate_new_reports(cui, year)
        except AnafError as e:
            logger.error(f"ANAF lookup failed for organization {organization.id} year={year}: {e}")
            raise InternalServerError.from_catalog(ORGANIZATION_ERRORS['ANAF_ERRORED']) from e

        try:
            with transaction.atomic():
                for row in rows:
                    OrganizationFinancial.objects.create(organization=organization, **row)
                self.report_service.add_yearly_entries(organization.organization_report, year)

                organization.synced_on = timezone.now()
                organization.completion_status = CompletionStatus.NOT_COMPLETED
                organization.save(update_fields=['synced_on', 'completion_status', 'updated_at'])
        except DatabaseError as e:
            logger.exception(f"Could not add {year} reporting entries for organization {organization.id}: {e}")
            raise InternalServerError.from_catalog(ORGANIZATION_ERRORS['ADD_NEW']) from e

        logger.info(f"Organization {organization.id}: reporting entries for {year} added")
        log_action(
            org_id=organization.id,
            action=AuditAction.NEW_REPORTING_ENTRIES,
            target_type="Organization",
            target_id=organization.id,
            target_label=organization.organization_general.name,
            performed_by=performed_by,
            context={'year': year},
        )
        return organization

    def create_reporting_entries_for_active_organizations(self, year: Optional[int] = None) -> dict:
        """Run the yearly cycle for every ACTIVE organization, one at a time."""
        year = year or previous_year()
        created = 0
        failed = 0
        organization_ids = Organization.objects.filter(
            status=OrganizationStatus.ACTIVE,
        ).values_list('id', flat=True)

        for organization_id in organization_ids:
            try:
                self.create_new_reporting_entries(organization_id, year)
                created += 1
            except Exception as e:
                failed += 1
                logger.exception(f"Reporting entries for organization {organization_id} failed: {e}")

        logger.info(f"Reporting cycle {year}: {created} organizations updated, {failed} failed")
        return {'created': created, 'failed': failed}

    # =========================================================================
    # Completion status
    # =========================================================================

    def update_organization_completion_status(self, organization_id) -> Optional[str]:
        """
        Recompute and store the completion status. Failures are logged and
        swallowed; the status converges on the next mutation.
        """
        try:
            organization = Organization.objects.prefetch_related(
                'organization_financial',
                'organization_report__reports',
                'organization_report__partners',
                'organization_report__investors',
            ).select_related('organization_report').get(id=organization_id)

            organization_report = organization.organization_report
            status = compute_completion_status(
                [row.status for row in organization.organization_financial.all()],
                [row.status for row in organization_report.reports.all()],
                [row.status for row in organization_report.partners.all()],
                [row.status for row in organization_report.investors.all()],
            )
            if organization.completion_status != status:
                organization.completion_status = status
                organization.save(update_fields=['completion_status', 'updated_at'])
            return status
        except Exception as e:
            logger.exception(f"Could not update completion status of organization {organization_id}: {e}")
            return None

    # =========================================================================
    # Counts and lookups used by statistics
    # =========================================================================

    def count_organizations(self, status: Optional[str] = None) -> int:
        organizations = Organization.objects.all()
        if status:
            organizations = organizations.filter(status=status)
        return organizations.count()

    def count_organizations_with_updated_reports(self) -> int:
        return Organization.objects.filter(
            status=OrganizationStatus.ACTIVE,
            completion_status=CompletionStatus.COMPLETED,
        ).count()

    def get_financial_and_reports_last_updated_on(self, organization_id):
        """Latest updated_at across financial, report, partner and investor rows."""
        organization = self.find(organization_id)
        report_id = organization.organization_report_id
        candidates = [
            OrganizationFinancial.objects.filter(organization_id=organization.id).aggregate(last=Max('updated_at'))['last'],
            Report.objects.filter(organization_report_id=report_id).aggregate(last=Max('updated_at'))['last'],
            Partner.objects.filter(organization_report_id=report_id).aggregate(last=Max('updated_at'))['last'],
            Investor.objects.filter(organization_report_id=report_id).aggregate(last=Max('updated_at'))['last'],
        ]
        candidates = [value for value in candidates if value]
        return max(candidates) if candidates else None

    def find_admins(self, organization_id):
        return find_organization_admins(organization_id)
