from typing import List, Optional
from uuid import UUID

from django.http import HttpRequest
from ninja import File, Form, Router
from ninja.files import UploadedFile
from pydantic import TypeAdapter

from apps.core.api_utils import parse_json_payload
from apps.identity.decorators import has_permission, require_organization_access
from apps.identity.permissions import Permissions
from .dtos import (
    FinancialOut, InvestorOut, OrganizationCreateIn, OrganizationOut,
    OrganizationUpdate, PartnerOut, ValidateGeneralIn, ValidationErrorOut,
)
from .services import OrganizationService

router = Router(tags=["Organizations"])

organization_service = OrganizationService()

update_adapter = TypeAdapter(OrganizationUpdate)


# =============================================================================
# Create / read
# =============================================================================

@router.post("/validate", response=List[ValidationErrorOut], auth=None)
def validate_general(request: HttpRequest, payload: ValidateGeneralIn):
    """
    **Public Endpoint**: uniqueness check for the registration form.
    Returns one error per field that is already taken.
    """
    return organization_service.validate_organization_general(payload)


@router.post("", response={201: OrganizationOut}, auth=None)
@has_permission(Permissions.ORGANIZATION_ADMINISTER)
def create_organization(
    request: HttpRequest,
    payload: str = Form(...),
    logo: Optional[UploadedFile] = File(None),
    statute: Optional[UploadedFile] = File(None),
):
    """Multipart: `payload` is the JSON body, `logo` and `statute` are optional files."""
    data = parse_json_payload(OrganizationCreateIn.model_validate_json, payload)
    organization = organization_service.create(data, logo=logo, statute=statute, performed_by=request.user)
    return 201, organization


@router.get("/{organization_id}", response=OrganizationOut, auth=None)
@has_permission(Permissions.ORGANIZATION_VIEW)
def get_organization(request: HttpRequest, organization_id: UUID):
    require_organization_access(request, organization_id)
    return organization_service.find_with_relations(organization_id)


@router.get("/{organization_id}/financial", response=List[FinancialOut], auth=None)
@has_permission(Permissions.ORGANIZATION_VIEW)
def get_organization_financial(request: HttpRequest, organization_id: UUID):
    require_organization_access(request, organization_id)
    return organization_service.get_financial(organization_id)


# =============================================================================
# Sectioned update
# =============================================================================

@router.patch("/{organization_id}", response=OrganizationOut, auth=None)
@has_permission(Permissions.ORGANIZATION_MANAGE)
def update_organization(request: HttpRequest, organization_id: UUID):
    """
    JSON body with exactly one section, e.g.
    {"section": "financial", "financial": {"id": "...", "data": {...}}}
    """
    require_organization_access(request, organization_id)
    section = parse_json_payload(update_adapter.validate_json, request.body or b'{}')
    organization_service.update(organization_id, section)
    return organization_service.find_with_relations(organization_id)


@router.post("/{organization_id}", response=OrganizationOut, auth=None)
@has_permission(Permissions.ORGANIZATION_MANAGE)
def update_organization_with_files(
    request: HttpRequest,
    organization_id: UUID,
    payload: str = Form(...),
    logo: Optional[UploadedFile] = File(None),
    statute: Optional[UploadedFile] = File(None),
):
    """Multipart variant of the sectioned update, for logo and statute uploads."""
    require_organization_access(request, organization_id)
    section = parse_json_payload(update_adapter.validate_json, payload)
    organization_service.update(organization_id, section, logo=logo, statute=statute)
    return organization_service.find_with_relations(organization_id)


# =============================================================================
# Partner / investor lists
# =============================================================================

@router.post("/{organization_id}/partners/{partner_id}", response=PartnerOut, auth=None)
@has_permission(Permissions.ORGANIZATION_MANAGE)
def upload_partners(
    request: HttpRequest,
    organization_id: UUID,
    partner_id: UUID,
    number_of_partners: Optional[int] = Form(None),
    file: UploadedFile = File(...),
):
    require_organization_access(request, organization_id)
    return organization_service.upload_partners(organization_id, partner_id, number_of_partners, file)


@router.delete("/{organization_id}/partners/{partner_id}", response=PartnerOut, auth=None)
@has_permission(Permissions.ORGANIZATION_MANAGE)
def delete_partners(request: HttpRequest, organization_id: UUID, partner_id: UUID):
    require_organization_access(request, organization_id)
    return organization_service.delete_partner(organization_id, partner_id)


@router.post("/{organization_id}/investors/{investor_id}", response=InvestorOut, auth=None)
@has_permission(Permissions.ORGANIZATION_MANAGE)
def upload_investors(
    request: HttpRequest,
    organization_id: UUID,
    investor_id: UUID,
    number_of_investors: Optional[int] = Form(None),
    file: UploadedFile = File(...),
):
    require_organization_access(request, organization_id)
    return organization_service.upload_investors(organization_id, investor_id, number_of_investors, file)


@router.delete("/{organization_id}/investors/{investor_id}", response=InvestorOut, auth=None)
@has_permission(Permissions.ORGANIZATION_MANAGE)
def delete_investors(request: HttpRequest, organization_id: UUID, investor_id: UUID):
    require_organization_access(request, organization_id)
    return organization_service.delete_investor(organization_id, investor_id)


# =============================================================================
# Lifecycle (super admin)
# =============================================================================

@router.patch("/{organization_id}/activate", response=OrganizationOut, auth=None)
@has_permission(Permissions.ORGANIZATION_ADMINISTER)
def activate_organization(request: HttpRequest, organization_id: UUID):
    organization_service.activate(organization_id, performed_by=request.user)
    return organization_service.find_with_relations(organization_id)


@router.patch("/{organization_id}/restrict", response=OrganizationOut, auth=None)
@has_permission(Permissions.ORGANIZATION_ADMINISTER)
def restrict_organization(request: HttpRequest, organization_id: UUID):
    organization_service.restrict(organization_id, performed_by=request.user)
    return organization_service.find_with_relations(organization_id)


@router.patch("/{organization_id}/restore", response=OrganizationOut, auth=None)
@has_permission(Permissions.ORGANIZATION_ADMINISTER)
def restore_organization(request: HttpRequest, organization_id: UUID):
    organization_service.restore(organization_id, performed_by=request.user)
    return organization_service.find_with_relations(organization_id)


@router.delete("/{organization_id}", response={204: None}, auth=None)
@has_permission(Permissions.ORGANIZATION_ADMINISTER)
def delete_organization(request: HttpRequest, organization_id: UUID):
    organization_service.delete(organization_id, performed_by=request.user)
    return 204, None


@router.post("/{organization_id}/reports", response=OrganizationOut, auth=None)
@has_permission(Permissions.ORGANIZATION_ADMINISTER)
def create_reporting_entries(request: HttpRequest, organization_id: UUID, year: Optional[int] = None):
    """Open a new yearly reporting cycle (default: last year)."""
    organization_service.create_new_reporting_entries(organization_id, year=year, performed_by=request.user)
    return organization_service.find_with_relations(organization_id)
