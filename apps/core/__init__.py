"""
Core app - collaborators shared by every ONG Hub app.

- Domain exceptions rendered by the API (exceptions)
- Base model with UUID ids and timestamps (models)
- ANAF fiscal registry client (anaf_service)
- File storage and presigned URLs (file_manager_service)
- Templated email (mail_service)
- Background jobs on local, Lambda/SQS or celery backends (task_service)
"""
