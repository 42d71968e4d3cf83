from typing import List, Optional
from uuid import UUID

from django.http import HttpRequest
from ninja import File, Form, Router
from ninja.errors import HttpError
from ninja.files import UploadedFile

from apps.core.api_utils import parse_json_payload
from apps.identity.decorators import has_permission, require_organization_access
from apps.identity.permissions import Permissions
from .dtos import (
    ApplicationIn, ApplicationOut, ApplicationPage, ApplicationRequestIn,
    ApplicationRequestOut, ApplicationUpdateIn, OrganizationApplicationOut,
)
from .services import ApplicationRequestService, ApplicationService

router = Router(tags=["Applications"])

application_service = ApplicationService()
application_request_service = ApplicationRequestService()


# =============================================================================
# Access requests
# =============================================================================

@router.post("/requests", response={201: ApplicationRequestOut}, auth=None)
@has_permission(Permissions.APPLICATION_REQUEST)
def create_application_request(request: HttpRequest, payload: ApplicationRequestIn):
    """An organization ADMIN asks for access to a catalog application."""
    if not request.user.org_id:
        raise HttpError(403, "Permission denied")
    return 201, application_request_service.create(request.user.org_id, payload.application_id)


@router.get("/requests", response=List[ApplicationRequestOut], auth=None)
@has_permission(Permissions.APPLICATION_MANAGE)
def list_application_requests(request: HttpRequest, status: Optional[str] = None):
    return application_request_service.find_all(status=status)


@router.patch("/requests/{request_id}/approve", response=ApplicationRequestOut, auth=None)
@has_permission(Permissions.APPLICATION_MANAGE)
def approve_application_request(request: HttpRequest, request_id: UUID):
    return application_request_service.approve(request_id, performed_by=request.user)


@router.patch("/requests/{request_id}/reject", response=ApplicationRequestOut, auth=None)
@has_permission(Permissions.APPLICATION_MANAGE)
def reject_application_request(request: HttpRequest, request_id: UUID):
    return application_request_service.reject(request_id, performed_by=request.user)


@router.get("/organization/{organization_id}", response=List[OrganizationApplicationOut], auth=None)
@has_permission(Permissions.APPLICATION_VIEW)
def list_organization_applications(request: HttpRequest, organization_id: UUID):
    require_organization_access(request, organization_id)
    return application_service.find_for_organization(organization_id)


# =============================================================================
# Catalog
# =============================================================================

@router.post("", response={201: ApplicationOut}, auth=None)
@has_permission(Permissions.APPLICATION_MANAGE)
def create_application(
    request: HttpRequest,
    payload: str = Form(...),
    logo: Optional[UploadedFile] = File(None),
):
    data = parse_json_payload(ApplicationIn.model_validate_json, payload)
    return 201, application_service.create(data, logo=logo)


@router.get("", response=ApplicationPage, auth=None)
@has_permission(Permissions.APPLICATION_MANAGE)
def list_applications(
    request: HttpRequest,
    search: Optional[str] = None,
    type: Optional[str] = None,
    status: Optional[str] = None,
    page: int = 1,
    page_size: int = 10,
):
    return application_service.find_all(search=search, type=type, status=status, page=page, page_size=page_size)


@router.get("/{application_id}", response=ApplicationOut, auth=None)
@has_permission(Permissions.APPLICATION_VIEW)
def get_application(request: HttpRequest, application_id: UUID):
    return application_service.find_one(application_id)


@router.patch("/{application_id}", response=ApplicationOut, auth=None)
@has_permission(Permissions.APPLICATION_MANAGE)
def update_application(request: HttpRequest, application_id: UUID, payload: ApplicationUpdateIn):
    return application_service.update(application_id, payload)


@router.post("/{application_id}", response=ApplicationOut, auth=None)
@has_permission(Permissions.APPLICATION_MANAGE)
def update_application_with_logo(
    request: HttpRequest,
    application_id: UUID,
    payload: str = Form(...),
    logo: Optional[UploadedFile] = File(None),
):
    """Multipart variant of the update, for replacing the logo."""
    data = parse_json_payload(ApplicationUpdateIn.model_validate_json, payload)
    return application_service.update(application_id, data, logo=logo)


@router.delete("/{application_id}", response={204: None}, auth=None)
@has_permission(Permissions.APPLICATION_MANAGE)
def delete_application(request: HttpRequest, application_id: UUID):
    application_service.delete(application_id)
    return 204, None


@router.patch("/{application_id}/restrict", response=OrganizationApplicationOut, auth=None)
@has_permission(Permissions.APPLICATION_MANAGE)
def restrict_application(request: HttpRequest, application_id: UUID, organization_id: UUID):
    return application_service.restrict(application_id, organization_id, performed_by=request.user)


@router.patch("/{application_id}/restore", response=OrganizationApplicationOut, auth=None)
@has_permission(Permissions.APPLICATION_MANAGE)
def restore_application(request: HttpRequest, application_id: UUID, organization_id: UUID):
    return application_service.restore(application_id, organization_id, performed_by=request.user)
