"""
Organization financial sub-service.

Yearly income/expense rows are seeded from ANAF, completed by the
organization, and periodically re-synchronised with the registry.
"""
import logging
from collections import defaultdict
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional

from django.db import transaction

from apps.core.anaf_service import AnafService
from apps.core.exceptions import NotFoundError
from .dtos import FinancialInformation, FinancialUpdateIn
from .errors import ORGANIZATION_FINANCIAL_ERRORS
from .models import (
    CompletionStatus, FinancialReportStatus, FinancialType, Organization,
    OrganizationFinancial, OrganizationStatus,
)

logger = logging.getLogger(__name__)

# ANAF balance-sheet indicators
ANAF_INCOME_INDICATOR = 'I38'
ANAF_EXPENSE_INDICATOR = 'I40'
ANAF_EMPLOYEES_INDICATOR = 'I46'


def determine_report_status(entered_total, registry_total, synced: bool) -> str:
    """
    Status of a financial report from the organization's total, the ANAF
    total and whether the row is synced with ANAF.
    """
    if entered_total is None:
        return FinancialReportStatus.NOT_COMPLETED
    if synced:
        if entered_total == registry_total:
            return FinancialReportStatus.COMPLETED
        return FinancialReportStatus.INVALID
    if entered_total != 0:
        return FinancialReportStatus.PENDING
    return FinancialReportStatus.NOT_COMPLETED


def sum_financial_data(data: Optional[Dict]) -> Decimal:
    """Sum the per-category amounts; anything non-numeric counts as 0."""
    total = Decimal('0')
    for value in (data or {}).values():
        if isinstance(value, bool) or value is None:
            continue
        try:
            amount = Decimal(str(value))
        except (InvalidOperation, ValueError):
            continue
        if amount.is_finite():
            total += amount
    return total


class OrganizationFinancialService:

    def __init__(self, anaf_service: Optional[AnafService] = None):
        self.anaf_service = anaf_service or AnafService()

    def update(self, payload: FinancialUpdateIn, organization_id=None) -> OrganizationFinancial:
        financials = OrganizationFinancial.objects.filter(id=payload.id)
        if organization_id is not None:
            financials = financials.filter(organization_id=organization_id)
        financial = financials.first()
        if not financial:
            raise NotFoundError.from_catalog(ORGANIZATION_FINANCIAL_ERRORS['GET'])

        totals = sum_financial_data(payload.data)

        financial.report_status = determine_report_status(totals, financial.total, financial.synched_anaf)
        financial.status = (
            CompletionStatus.COMPLETED if totals == financial.total else CompletionStatus.NOT_COMPLETED
        )
        financial.data = payload.data
        financial.save()
        return financial

    def generate_financial_reports_data(self, year: int, info: Optional[FinancialInformation]) -> List[dict]:
        """Field values for the EXPENSE and INCOME rows of `year`."""
        return [
            {
                'type': FinancialType.EXPENSE,
                'year': year,
                'total': info.total_expense if info else Decimal('0'),
                'number_of_employees': info.number_of_employees if info else 0,
                'synched_anaf': bool(info),
            },
            {
                'type': FinancialType.INCOME,
                'year': year,
                'total': info.total_income if info else Decimal('0'),
                'number_of_employees': info.number_of_employees if info else 0,
                'synched_anaf': bool(info),
            },
        ]

    def get_financial_information_from_anaf(self, cui: str, year: int) -> Optional[FinancialInformation]:
        """
        ANAF figures for `cui` in `year`, or None unless income, expense and
        employee count are all present and numeric. Transport errors propagate.
        """
        indicators = self.anaf_service.get_financial_information(cui, year)
        if not indicators:
            return None

        values = {entry.get('indicator'): entry.get('val_indicator') for entry in indicators}
        required = [ANAF_INCOME_INDICATOR, ANAF_EXPENSE_INDICATOR, ANAF_EMPLOYEES_INDICATOR]
        missing = [name for name in required if values.get(name) is None]
        if missing:
            logger.warning(f"ANAF data for cui={cui} year={year} is missing indicators {missing}")
            return None

        try:
            total_income = Decimal(str(values[ANAF_INCOME_INDICATOR]))
            total_expense = Decimal(str(values[ANAF_EXPENSE_INDICATOR]))
            number_of_employees = int(values[ANAF_EMPLOYEES_INDICATOR])
        except (InvalidOperation, ValueError, TypeError) as e:
            logger.warning(f"ANAF data for cui={cui} year={year} is malformed: {e!r}")
            return None
        if not (total_income.is_finite() and total_expense.is_finite()):
            logger.warning(f"ANAF data for cui={cui} year={year} has non-finite totals")
            return None

        return FinancialInformation(
            total_income=total_income,
            total_expense=total_expense,
            number_of_employees=number_of_employees,
        )

    def generate_new_reports(self, cui: str, year: int) -> List[dict]:
        info = self.get_financial_information_from_anaf(cui, year)
        return self.generate_financial_reports_data(year, info)

    def count_not_completed_reports(self, organization_id) -> int:
        return OrganizationFinancial.objects.filter(
            organization_id=organization_id,
        ).exclude(
            report_status__in=[FinancialReportStatus.COMPLETED, FinancialReportStatus.PENDING],
        ).count()

    # =========================================================================
    # ANAF refetch batch
    # =========================================================================

    def refetch_anaf_data_for_financial_reports(self) -> Dict[str, int]:
        """
        Re-synchronise every ACTIVE organization that still has unsynced
        rows. Organizations are processed one at a time; a failure is
        logged and does not stop the batch.
        """
        organizations = Organization.objects.filter(
            status=OrganizationStatus.ACTIVE,
            organization_financial__synched_anaf=False,
        ).select_related('organization_general').distinct()

        updated = 0
        failed = 0
        for organization in organizations:
            try:
                updated += self._refetch_for_organization(organization)
            except Exception as e:
                failed += 1
                logger.exception(f"ANAF refetch failed for organization {organization.id}: {e}")

        logger.info(f"ANAF refetch done: {updated} rows updated, {failed} organizations failed")
        return {'updated': updated, 'failed': failed}

    def _refetch_for_organization(self, organization: Organization) -> int:
        cui = organization.organization_general.cui
        by_year = defaultdict(dict)
        for row in organization.organization_financial.filter(synched_anaf=False):
            by_year[row.year][row.type] = row

        fetched = []
        for year, rows in sorted(by_year.items()):
            info = self.get_financial_information_from_anaf(cui, year)
            if info:
                fetched.append((info, rows))

        updated = 0
        with transaction.atomic():
            for info, rows in fetched:
                for financial_type, row in rows.items():
                    anaf_total = info.total_income if financial_type == FinancialType.INCOME else info.total_expense
                    existing_total = sum_financial_data(row.data) if row.data is not None else None

                    row.report_status = determine_report_status(existing_total, anaf_total, True)
                    row.total = anaf_total
                    row.number_of_employees = info.number_of_employees
                    row.synched_anaf = True
                    row.save()
                    updated += 1
        return updated
