from celery import shared_task
import logging

from apps.organizations.services import OrganizationService
from apps.organizations.financial_service import OrganizationFinancialService

logger = logging.getLogger(__name__)


@shared_task
def refetch_anaf_data_task():
    """
    Daily: re-synchronise unsynced financial rows of ACTIVE organizations
    with ANAF.
    """
    result = OrganizationFinancialService().refetch_anaf_data_for_financial_reports()
    logger.info(f"refetch_anaf_data_task finished: {result}")
    return result


@shared_task
def generate_reporting_entries_task(year=None):
    """
    Yearly (1 January): open the reporting cycle of the previous year for
    every ACTIVE organization.
    """
    result = OrganizationService().create_reporting_entries_for_active_organizations(year)
    logger.info(f"generate_reporting_entries_task finished: {result}")
    return result
