"""
Organization registration requests.

A public request registers the organization right away (status PENDING)
and keeps the prospective admin's details. Approval activates the
organization and creates its ADMIN user; rejection deletes the still
PENDING organization.
"""
import logging
from typing import List, Optional

from django.core.files.uploadedfile import UploadedFile
from django.db import transaction

from apps.audit.audit_service import AuditAction, log_action
from apps.core.exceptions import BadRequestError, NotFoundError
from apps.core.mail_service import MailService
from apps.identity.models import User
from apps.identity.services import create_organization_admin, find_super_admin_emails
from apps.organizations.general_service import normalize_phone
from apps.organizations.services import OrganizationService
from .dtos import OrganizationRequestIn
from .errors import ORGANIZATION_REQUEST_ERRORS
from .models import OrganizationRequest, RequestStatus

logger = logging.getLogger(__name__)

REQUEST_EMAIL_TEMPLATE = 'emails/organization_request.html'


class OrganizationRequestService:

    def __init__(
        self,
        organization_service: Optional[OrganizationService] = None,
        mail_service: Optional[MailService] = None,
    ):
        self.organization_service = organization_service or OrganizationService()
        self.mail_service = mail_service or MailService()

    def create(
        self,
        payload: OrganizationRequestIn,
        logo: Optional[UploadedFile] = None,
        statute: Optional[UploadedFile] = None,
    ) -> OrganizationRequest:
        email = payload.admin.email.strip().lower()
        email_in_use = (
            User.objects.filter(email__iexact=email).exists()
            or OrganizationRequest.objects.filter(email__iexact=email, status=RequestStatus.PENDING).exists()
        )
        if email_in_use:
            raise BadRequestError.from_catalog(ORGANIZATION_REQUEST_ERRORS['EMAIL_IN_USE'])

        organization = self.organization_service.create(payload.organization, logo=logo, statute=statute)
        organization_name = organization.organization_general.name

        request = OrganizationRequest.objects.create(
            name=payload.admin.name,
            email=email,
            phone=normalize_phone(payload.admin.phone),
            organization_name=organization_name,
            organization=organization,
        )
        logger.info(f"Organization request {request.id} filed for {organization_name}")

        self._notify(request, "Cererea ta a fost înregistrată",
                     "Vei primi un email după ce un administrator analizează cererea.")
        self._notify_super_admins(request)
        return request

    def find_all(self, status: Optional[str] = None, search: Optional[str] = None) -> List[OrganizationRequest]:
        requests = OrganizationRequest.objects.all()
        if status:
            requests = requests.filter(status=status)
        if search:
            requests = requests.filter(organization_name__icontains=search)
        return list(requests)

    def find_one(self, request_id) -> OrganizationRequest:
        request = OrganizationRequest.objects.filter(id=request_id).first()
        if not request:
            raise NotFoundError.from_catalog(ORGANIZATION_REQUEST_ERRORS['GET'])
        return request

    def approve(self, request_id, performed_by=None) -> OrganizationRequest:
        request = self.find_one(request_id)
        if request.status != RequestStatus.PENDING:
            raise BadRequestError.from_catalog(ORGANIZATION_REQUEST_ERRORS['APPROVE'])

        with transaction.atomic():
            self.organization_service.activate(request.organization_id, performed_by=performed_by)
            create_organization_admin(request.organization_id, request.name, request.email, request.phone)
            request.status = RequestStatus.APPROVED
            request.save(update_fields=['status', 'updated_at'])

        logger.info(f"Organization request {request.id} approved")
        self._audit(request, AuditAction.APPROVE_ORGANIZATION_REQUEST, performed_by)
        self._notify(request, "Cererea ta a fost aprobată",
                     "Contul de administrator a fost creat. Setează-ți parola din pagina de autentificare.")
        return request

    def reject(self, request_id, performed_by=None) -> OrganizationRequest:
        request = self.find_one(request_id)
        if request.status != RequestStatus.PENDING:
            raise BadRequestError.from_catalog(ORGANIZATION_REQUEST_ERRORS['REJECT'])

        organization_id = request.organization_id
        if organization_id:
            self.organization_service.delete(organization_id, performed_by=performed_by)

        request.organization = None
        request.status = RequestStatus.DECLINED
        request.save(update_fields=['organization', 'status', 'updated_at'])

        logger.info(f"Organization request {request.id} rejected")
        self._audit(request, AuditAction.REJECT_ORGANIZATION_REQUEST, performed_by, organization_id)
        self._notify(request, "Cererea ta a fost respinsă",
                     "Pentru detalii contactează echipa ONG Hub.")
        return request

    def count_pending(self) -> int:
        return OrganizationRequest.objects.filter(status=RequestStatus.PENDING).count()

    def _audit(self, request: OrganizationRequest, action: str, performed_by, organization_id=None) -> None:
        log_action(
            org_id=organization_id or request.organization_id or request.id,
            action=action,
            target_type="OrganizationRequest",
            target_id=request.id,
            target_label=request.organization_name,
            performed_by=performed_by,
        )

    def _notify(self, request: OrganizationRequest, title: str, subtitle: str) -> None:
        self.mail_service.send_email(
            to=[request.email],
            subject=title,
            template=REQUEST_EMAIL_TEMPLATE,
            context={'title': title, 'subtitle': subtitle, 'organization_name': request.organization_name},
        )

    def _notify_super_admins(self, request: OrganizationRequest) -> None:
        self.mail_service.send_email(
            to=find_super_admin_emails(),
            subject="Cerere nouă de înregistrare",
            template=REQUEST_EMAIL_TEMPLATE,
            context={
                'title': "Cerere nouă de înregistrare",
                'subtitle': f"{request.name} ({request.email}) a solicitat înregistrarea organizației.",
                'organization_name': request.organization_name,
            },
        )
