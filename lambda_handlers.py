"""
AWS Lambda entry points.

- api_handler: HTTP requests from API Gateway, Django served through Mangum
- sqs_task_handler: jobs queued by the lambda task backend
- scheduled_refetch_anaf_data, scheduled_reporting_entries: EventBridge rules
"""
import json
import logging
import os

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

import django
django.setup()

from apps.core.backends.local_backend import run_handler
from apps.core.task_service import GENERATE_REPORTING_ENTRIES, REFETCH_ANAF_DATA

logger = logging.getLogger(__name__)


def _ok(body):
    return {'statusCode': 200, 'body': json.dumps(body)}


def sqs_task_handler(event, context):
    """
    Run every job of an SQS batch.

    A failing job raises, so SQS retries the batch and finally moves it to
    the dead-letter queue.
    """
    processed = 0
    for record in event.get('Records', []):
        message = json.loads(record['body'])
        task_name = message['task_name']
        logger.info(f"Running {task_name} ({message.get('task_id', 'unknown')})")
        result = run_handler(task_name, message.get('payload') or {})
        logger.info(f"{task_name} finished: {result}")
        processed += 1
    return _ok({'processed': processed})


def scheduled_refetch_anaf_data(event, context):
    """Daily at 03:00."""
    return _ok(run_handler(REFETCH_ANAF_DATA, {}))


def scheduled_reporting_entries(event, context):
    """1 January at 00:00. The event may pin the year: {"year": 2025}."""
    year = (event or {}).get('year')
    logger.info(f"Opening reporting cycle (year={year})")
    return _ok(run_handler(GENERATE_REPORTING_ENTRIES, {'year': year}))


_asgi_handler = None


def api_handler(event, context):
    global _asgi_handler

    if _asgi_handler is None:
        from mangum import Mangum
        from config.asgi import application
        _asgi_handler = Mangum(application, lifespan="off")

    return _asgi_handler(event, context)
