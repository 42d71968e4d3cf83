"""
Celery configuration for ONG Hub.
"""
import os
from celery import Celery
from celery.schedules import crontab

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

app = Celery('config')
app.config_from_object('django.conf:settings', namespace='CELERY')
app.autodiscover_tasks()

# Celery Beat Schedule
app.conf.beat_schedule = {
    'refetch-anaf-data': {
        'task': 'apps.organizations.tasks.refetch_anaf_data_task',
        'schedule': crontab(hour='3', minute='0'),  # Daily
    },
    'generate-reporting-entries': {
        'task': 'apps.organizations.tasks.generate_reporting_entries_task',
        'schedule': crontab(month_of_year='1', day_of_month='1', hour='0', minute='0'),
    },
}
