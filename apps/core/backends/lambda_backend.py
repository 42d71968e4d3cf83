"""
SQS job execution for the serverless deployment.

Messages are JSON objects ``{"task_id", "task_name", "payload"}`` consumed
by ``lambda_handlers.sqs_task_handler``. Reads TASK_QUEUE_URL and
AWS_REGION (default eu-central-1).
"""
import json
import logging
import os
import uuid
from typing import Any, Dict

import boto3

from apps.core.task_service import TaskServiceInterface

logger = logging.getLogger(__name__)

# SQS upper bound for DelaySeconds
MAX_DELAY_SECONDS = 900


class LambdaTaskService(TaskServiceInterface):

    def __init__(self, queue_url=None, client=None):
        self.queue_url = queue_url or os.getenv('TASK_QUEUE_URL')
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = boto3.client('sqs', region_name=os.getenv('AWS_REGION', 'eu-central-1'))
        return self._client

    def send_task(self, task_name: str, payload: Dict[str, Any], delay_seconds: int = 0) -> str:
        if not self.queue_url:
            raise RuntimeError("TASK_QUEUE_URL is not set; cannot queue jobs for Lambda")

        job_id = str(uuid.uuid4())
        try:
            response = self.client.send_message(
                QueueUrl=self.queue_url,
                MessageBody=json.dumps({'task_id': job_id, 'task_name': task_name, 'payload': payload}),
                DelaySeconds=min(delay_seconds, MAX_DELAY_SECONDS),
                MessageAttributes={'TaskName': {'DataType': 'String', 'StringValue': task_name}},
            )
        except Exception:
            logger.exception(f"[LAMBDA] Could not queue {task_name}")
            raise

        logger.info(f"[LAMBDA] Queued {task_name} as {job_id} (message {response['MessageId']})")
        return job_id
