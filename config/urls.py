"""
URL configuration for the ONG Hub project.
"""
from django.contrib import admin
from django.urls import path
from django.conf import settings
from django.conf.urls.static import static
from ninja import NinjaAPI

from apps.core.exceptions import ServiceError

api = NinjaAPI(
    title="ONG Hub API",
    version="1.0.0",
    description="NGO registry: organization profiles, reporting, applications and statistics",
    docs_url="/docs",
)


@api.exception_handler(ServiceError)
def service_error_handler(request, exc: ServiceError):
    return api.create_response(request, exc.to_dict(), status=exc.status_code)


from apps.identity.api import router as identity_router
from apps.nomenclatures.api import router as nomenclatures_router
from apps.organizations.api import router as organizations_router
from apps.organization_requests.api import router as requests_router
from apps.applications.api import router as applications_router
from apps.hub_statistics.api import router as statistics_router
from apps.audit.api import router as audit_router

api.add_router("/identity/", identity_router)
api.add_router("/nomenclatures/", nomenclatures_router)
api.add_router("/organizations/", organizations_router)
api.add_router("/requests/", requests_router)
api.add_router("/applications/", applications_router)
api.add_router("/statistics/", statistics_router)
api.add_router("/audit/", audit_router)

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/', api.urls),
]

# Serve media files in development
if settings.DEBUG:
    urlpatterns += static(
        getattr(settings, 'MEDIA_URL', '/media/'),
        document_root=getattr(settings, 'MEDIA_ROOT', settings.BASE_DIR / 'media')
    )
