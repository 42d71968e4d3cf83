"""
Organization report sub-service: yearly activity reports plus the
partner and investor lists (open data).
"""
import logging
from typing import Optional

from django.core.files.uploadedfile import UploadedFile
from django.db import transaction

from apps.core.exceptions import InternalServerError, NotFoundError
from apps.core.file_manager_service import FileManagerService, FileType, FileUploadError
from .dtos import ReportUpdateIn
from .errors import ORGANIZATION_REPORT_ERRORS, upload_error_to_service_error
from .models import CompletionStatus, Investor, Organization, OrganizationReport, Partner, Report

logger = logging.getLogger(__name__)

PARTNERS_DIR = 'partners'
INVESTORS_DIR = 'investors'


class OrganizationReportService:

    def __init__(self, file_manager: Optional[FileManagerService] = None):
        self.file_manager = file_manager or FileManagerService()

    def create(self, year: int) -> OrganizationReport:
        organization_report = OrganizationReport.objects.create()
        self.add_yearly_entries(organization_report, year)
        return organization_report

    def add_yearly_entries(self, organization_report: OrganizationReport, year: int) -> None:
        Report.objects.create(organization_report=organization_report, year=year)
        Partner.objects.create(organization_report=organization_report, year=year)
        Investor.objects.create(organization_report=organization_report, year=year)

    def has_entries_for_year(self, organization_report: OrganizationReport, year: int) -> bool:
        return (
            organization_report.reports.filter(year=year).exists()
            or organization_report.partners.filter(year=year).exists()
            or organization_report.investors.filter(year=year).exists()
        )

    def update(self, organization: Organization, payload: ReportUpdateIn) -> Report:
        report = Report.objects.filter(
            id=payload.report_id, organization_report_id=organization.organization_report_id,
        ).first()
        if not report:
            raise NotFoundError.from_catalog(ORGANIZATION_REPORT_ERRORS['GET_REPORT'])

        data = payload.model_dump(exclude_unset=True, exclude={'report_id'})
        for attr, value in data.items():
            setattr(report, attr, value)
        report.status = CompletionStatus.COMPLETED if report.report else CompletionStatus.NOT_COMPLETED
        report.save()
        return report

    # =========================================================================
    # Partner / investor lists
    # =========================================================================

    def upload_partners(self, organization: Organization, partner_id, number_of_partners: Optional[int],
                        file: UploadedFile) -> Partner:
        partner = self._get_partner(organization, partner_id)
        return self._upload_list(organization, partner, PARTNERS_DIR, file, number_of_partners=number_of_partners)

    def upload_investors(self, organization: Organization, investor_id, number_of_investors: Optional[int],
                         file: UploadedFile) -> Investor:
        investor = self._get_investor(organization, investor_id)
        return self._upload_list(organization, investor, INVESTORS_DIR, file, number_of_investors=number_of_investors)

    def delete_partners(self, organization: Organization, partner_id) -> Partner:
        return self._delete_list(self._get_partner(organization, partner_id), number_field='number_of_partners')

    def delete_investors(self, organization: Organization, investor_id) -> Investor:
        return self._delete_list(self._get_investor(organization, investor_id), number_field='number_of_investors')

    def count_not_completed_reports(self, organization_id) -> int:
        organization_report_id = Organization.objects.filter(
            id=organization_id,
        ).values_list('organization_report_id', flat=True).first()
        if not organization_report_id:
            return 0

        return sum(
            model.objects.filter(
                organization_report_id=organization_report_id,
                status=CompletionStatus.NOT_COMPLETED,
            ).count()
            for model in (Report, Partner, Investor)
        )

    def _get_partner(self, organization: Organization, partner_id) -> Partner:
        partner = Partner.objects.filter(
            id=partner_id, organization_report_id=organization.organization_report_id,
        ).first()
        if not partner:
            raise NotFoundError.from_catalog(ORGANIZATION_REPORT_ERRORS['GET_PARTNER'])
        return partner

    def _get_investor(self, organization: Organization, investor_id) -> Investor:
        investor = Investor.objects.filter(
            id=investor_id, organization_report_id=organization.organization_report_id,
        ).first()
        if not investor:
            raise NotFoundError.from_catalog(ORGANIZATION_REPORT_ERRORS['GET_INVESTOR'])
        return investor

    def _upload_list(self, organization, entry, directory: str, file: UploadedFile, **numbers):
        try:
            with transaction.atomic():
                if entry.path:
                    self.file_manager.delete_files([entry.path])
                keys = self.file_manager.upload_files(f"{organization.id}/{directory}", [file], FileType.DOCUMENT)

                entry.path = keys[0]
                for attr, value in numbers.items():
                    setattr(entry, attr, value)
                entry.status = CompletionStatus.COMPLETED
                entry.save()
        except FileUploadError as e:
            logger.error(f"Upload of {directory} list failed for organization {organization.id}: {e.message}")
            raise upload_error_to_service_error(e) from e
        return entry

    def _delete_list(self, entry, number_field: str):
        try:
            self.file_manager.delete_files([entry.path])
        except FileUploadError as e:
            logger.error(f"Could not delete {entry.path}: {e.message}")
            raise InternalServerError.from_catalog(ORGANIZATION_REPORT_ERRORS['DELETE']) from e

        entry.path = None
        setattr(entry, number_field, None)
        entry.status = CompletionStatus.NOT_COMPLETED
        entry.save()
        return entry
