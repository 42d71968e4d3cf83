from typing import List, Optional
from uuid import UUID

from django.http import HttpRequest
from ninja import File, Form, Router
from ninja.files import UploadedFile

from apps.core.api_utils import parse_json_payload
from apps.identity.decorators import has_permission
from apps.identity.permissions import Permissions
from .dtos import OrganizationRequestIn, OrganizationRequestOut
from .services import OrganizationRequestService

router = Router(tags=["Requests"])

request_service = OrganizationRequestService()


@router.post("/organization", response={201: OrganizationRequestOut}, auth=None)
def create_organization_request(
    request: HttpRequest,
    payload: str = Form(...),
    logo: Optional[UploadedFile] = File(None),
    statute: Optional[UploadedFile] = File(None),
):
    """
    **Public Endpoint**: register a new organization.
    Multipart: `payload` is {"admin": {...}, "organization": {...}} as JSON.
    """
    data = parse_json_payload(OrganizationRequestIn.model_validate_json, payload)
    return 201, request_service.create(data, logo=logo, statute=statute)


@router.get("/organization", response=List[OrganizationRequestOut], auth=None)
@has_permission(Permissions.ORGANIZATION_REQUEST_MANAGE)
def list_organization_requests(request: HttpRequest, status: Optional[str] = None, search: Optional[str] = None):
    return request_service.find_all(status=status, search=search)


@router.get("/organization/{request_id}", response=OrganizationRequestOut, auth=None)
@has_permission(Permissions.ORGANIZATION_REQUEST_MANAGE)
def get_organization_request(request: HttpRequest, request_id: UUID):
    return request_service.find_one(request_id)


@router.patch("/organization/{request_id}/approve", response=OrganizationRequestOut, auth=None)
@has_permission(Permissions.ORGANIZATION_REQUEST_MANAGE)
def approve_organization_request(request: HttpRequest, request_id: UUID):
    return request_service.approve(request_id, performed_by=request.user)


@router.patch("/organization/{request_id}/reject", response=OrganizationRequestOut, auth=None)
@has_permission(Permissions.ORGANIZATION_REQUEST_MANAGE)
def reject_organization_request(request: HttpRequest, request_id: UUID):
    return request_service.reject(request_id, performed_by=request.user)
