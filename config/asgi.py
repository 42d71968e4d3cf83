"""
ASGI config for ONG Hub.

Served by Mangum on AWS Lambda (see lambda_handlers.api_handler) or by
any ASGI server.
"""
import os

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

from django.core.asgi import get_asgi_application

# Initialize Django at module load time (container startup, not request time)
application = get_asgi_application()
