"""
Tests for the shared gateways: ANAF, file storage, mail and the task facade.
"""
import json
import os
import statistics
from unittest.mock import MagicMock, patch

import requests
from django.core import mail
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import SimpleTestCase, TestCase, override_settings

from apps.core.anaf_service import AnafError, AnafService
from apps.core.backends.celery_backend import CeleryTaskService
from apps.core.backends.lambda_backend import LambdaTaskService
from apps.core.backends.local_backend import TASK_HANDLERS, LocalTaskService
from apps.core.file_manager_service import FileManagerService, FileType, FileUploadError
from apps.core.mail_service import MailService
from apps.core.task_service import TaskService


def anaf_response(body, status=200):
    response = MagicMock()
    response.json.return_value = body
    if status >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status}")
    return response


class AnafServiceTest(SimpleTestCase):

    def setUp(self):
        self.session = MagicMock()
        self.service = AnafService(base_url="https://anaf.test/bilant", timeout=5, session=self.session)

    def test_returns_indicators_and_strips_vat_prefix(self):
        indicators = [{'indicator': 'I38', 'val_indicator': 10}]
        self.session.get.return_value = anaf_response({'i': indicators})

        self.assertEqual(self.service.get_financial_information(" ro 123 ", 2024), indicators)
        self.session.get.assert_called_once_with(
            "https://anaf.test/bilant", params={'an': 2024, 'cui': '123'}, timeout=5,
        )

    def test_empty_answer_is_none(self):
        self.session.get.return_value = anaf_response({'i': []})
        self.assertIsNone(self.service.get_financial_information("123", 2024))

    def test_transport_errors_raise(self):
        self.session.get.side_effect = requests.ConnectionError("refused")
        with self.assertRaises(AnafError):
            self.service.get_financial_information("123", 2024)

    def test_http_errors_raise(self):
        self.session.get.return_value = anaf_response({}, status=503)
        with self.assertRaises(AnafError):
            self.service.get_financial_information("123", 2024)

    def test_app_packages_do_not_shadow_libraries(self):
        self.assertTrue(hasattr(requests, 'Session'))
        self.assertEqual(statistics.mean([1, 2, 3]), 2)
        for module in (requests, statistics):
            self.assertNotIn(f"{os.sep}apps{os.sep}", module.__file__)


class FileManagerServiceTest(SimpleTestCase):

    def setUp(self):
        self.storage = MagicMock()
        self.storage.save.side_effect = lambda name, file: name
        self.service = FileManagerService(storage=self.storage, max_file_size=10)

    def test_upload_returns_keys_in_order(self):
        files = [
            SimpleUploadedFile("a.pdf", b"1", content_type="application/pdf"),
            SimpleUploadedFile("b.pdf", b"2", content_type="application/pdf"),
        ]
        keys = self.service.upload_files("org/statute", files, FileType.DOCUMENT)
        self.assertEqual(keys, ["org/statute/a.pdf", "org/statute/b.pdf"])

    def test_rejections(self):
        cases = [
            (SimpleUploadedFile("big.png", b"x" * 11, content_type="image/png"), FileType.IMAGE, FileUploadError.SIZE),
            (SimpleUploadedFile("a.gif", b"x", content_type="image/gif"), FileType.IMAGE, FileUploadError.IMAGE),
            (SimpleUploadedFile("a.exe", b"x", content_type="application/x-msdownload"), FileType.DOCUMENT,
             FileUploadError.UPLOAD),
        ]
        for file, file_type, kind in cases:
            with self.subTest(kind=kind):
                with self.assertRaises(FileUploadError) as ctx:
                    self.service.upload_files("org", [file], file_type)
                self.assertEqual(ctx.exception.kind, kind)
        self.storage.save.assert_not_called()

    def test_storage_failure_is_upload_error(self):
        self.storage.save.side_effect = OSError("bucket gone")
        with self.assertRaises(FileUploadError) as ctx:
            self.service.upload_files("org", [SimpleUploadedFile("a.csv", b"x", content_type="text/csv")])
        self.assertEqual(ctx.exception.kind, FileUploadError.UPLOAD)

    def test_presigned_url(self):
        self.storage.url.return_value = "https://files.test/org/logo/a.png"
        self.assertIsNone(self.service.generate_presigned_url(None))

        with override_settings(USE_S3_STORAGE=True, PRESIGNED_URL_EXPIRATION=60):
            self.assertEqual(self.service.generate_presigned_url("org/logo/a.png"), "https://files.test/org/logo/a.png")
        self.storage.url.assert_called_with("org/logo/a.png", expire=60)


class MailServiceTest(SimpleTestCase):

    def test_renders_template(self):
        sent = MailService(from_email="hub@test.ro").send_email(
            to=["ana@ngo.ro", ""],
            subject="Salut",
            template='emails/organization_request.html',
            context={'title': "Salut", 'subtitle': "Test", 'organization_name': "Asociatia"},
        )

        self.assertTrue(sent)
        self.assertEqual(mail.outbox[0].to, ["ana@ngo.ro"])
        self.assertIn("Asociatia", mail.outbox[0].body)

    def test_no_recipients_is_skipped(self):
        self.assertFalse(MailService().send_email(to=[], subject="Nimic", html="<p>x</p>"))
        self.assertEqual(len(mail.outbox), 0)


class TaskServiceTest(TestCase):

    @patch.dict('os.environ', {'TASK_BACKEND': 'local'})
    def test_local_backend_runs_handler(self):
        handler = MagicMock(return_value={'created': 0, 'failed': 0})
        with patch.dict(TASK_HANDLERS, {'generate_reporting_entries': handler}):
            task_id = TaskService.generate_reporting_entries(year=2024)

        self.assertTrue(task_id)
        handler.assert_called_once_with(year=2024)

    @patch.dict('os.environ', {'TASK_BACKEND': 'local'})
    def test_refetch_runs_the_batch(self):
        with patch('apps.organizations.financial_service.OrganizationFinancialService.'
                   'refetch_anaf_data_for_financial_reports', return_value={'updated': 0, 'failed': 0}) as batch:
            TaskService.refetch_anaf_data()
        batch.assert_called_once_with()

    @patch.dict('os.environ', {'TASK_BACKEND': 'nope'})
    def test_unknown_backend(self):
        with self.assertRaises(ValueError):
            TaskService.refetch_anaf_data()

    def test_local_backend_rejects_unknown_jobs(self):
        with self.assertRaises(ValueError):
            LocalTaskService().send_task("reindex", {})


class QueuedBackendTest(SimpleTestCase):

    def test_lambda_backend_queues_message(self):
        client = MagicMock()
        client.send_message.return_value = {'MessageId': "m-1"}

        job_id = LambdaTaskService(queue_url="https://sqs.test/jobs", client=client).send_task(
            "generate_reporting_entries", {'year': 2024}, delay_seconds=3600,
        )

        kwargs = client.send_message.call_args.kwargs
        self.assertEqual(kwargs['QueueUrl'], "https://sqs.test/jobs")
        self.assertEqual(kwargs['DelaySeconds'], 900)
        self.assertEqual(
            json.loads(kwargs['MessageBody']),
            {'task_id': job_id, 'task_name': "generate_reporting_entries", 'payload': {'year': 2024}},
        )

    @patch.dict('os.environ', {'TASK_QUEUE_URL': ''})
    def test_lambda_backend_needs_a_queue(self):
        with self.assertRaises(RuntimeError):
            LambdaTaskService(client=MagicMock()).send_task("refetch_anaf_data", {})

    @patch('apps.core.backends.celery_backend.current_app')
    def test_celery_backend_sends_by_name(self, celery_app):
        job_id = CeleryTaskService().send_task("refetch_anaf_data", {})

        celery_app.send_task.assert_called_once_with(
            'apps.organizations.tasks.refetch_anaf_data_task', kwargs={}, countdown=None, task_id=job_id,
        )

    def test_sqs_consumer_runs_each_record(self):
        import lambda_handlers

        handler = MagicMock(return_value={'updated': 1, 'failed': 0})
        event = {'Records': [
            {'body': json.dumps({'task_id': "1", 'task_name': "refetch_anaf_data", 'payload': {}})},
            {'body': json.dumps({'task_id': "2", 'task_name': "refetch_anaf_data"})},
        ]}
        with patch.dict(TASK_HANDLERS, {'refetch_anaf_data': handler}):
            response = lambda_handlers.sqs_task_handler(event, None)

        self.assertEqual(json.loads(response['body']), {'processed': 2})
        self.assertEqual(handler.call_count, 2)
