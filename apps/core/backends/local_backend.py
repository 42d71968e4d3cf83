"""
Inline job execution.

The handler registry below is shared with the SQS consumer in
lambda_handlers, so a job runs the same code whichever backend queued it.
"""
import logging
import uuid
from typing import Any, Dict

from apps.core.task_service import GENERATE_REPORTING_ENTRIES, REFETCH_ANAF_DATA, TaskServiceInterface

logger = logging.getLogger(__name__)

TASK_HANDLERS = {}


def register_handler(task_name: str):
    def decorator(func):
        TASK_HANDLERS[task_name] = func
        return func
    return decorator


def run_handler(task_name: str, payload: Dict[str, Any]):
    handler = TASK_HANDLERS.get(task_name)
    if handler is None:
        raise ValueError(f"No handler registered for task: {task_name}")
    return handler(**payload)


class LocalTaskService(TaskServiceInterface):

    def send_task(self, task_name: str, payload: Dict[str, Any], delay_seconds: int = 0) -> str:
        job_id = uuid.uuid4().hex
        if delay_seconds:
            logger.warning(f"[LOCAL] Ignoring delay of {delay_seconds}s for {task_name}")

        try:
            result = run_handler(task_name, payload)
        except Exception:
            logger.exception(f"[LOCAL] {task_name} ({job_id}) failed")
            raise
        logger.info(f"[LOCAL] {task_name} ({job_id}) finished: {result}")
        return job_id


# =============================================================================
# Handlers
# =============================================================================

@register_handler(REFETCH_ANAF_DATA)
def refetch_anaf_data():
    from apps.organizations.financial_service import OrganizationFinancialService
    return OrganizationFinancialService().refetch_anaf_data_for_financial_reports()


@register_handler(GENERATE_REPORTING_ENTRIES)
def generate_reporting_entries(year=None):
    from apps.organizations.services import OrganizationService
    return OrganizationService().create_reporting_entries_for_active_organizations(year)
