"""
Application catalog and organizations' access to it.

ApplicationService owns the catalog (super admin) and the per
organization access rows; ApplicationRequestService handles the
organizations' requests for access.
"""
import logging
from typing import List, Optional

from django.core.files.uploadedfile import UploadedFile
from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import Q

from apps.audit.audit_service import AuditAction, log_action
from apps.core.exceptions import BadRequestError, InternalServerError, NotFoundError
from apps.core.file_manager_service import FileManagerService, FileType, FileUploadError
from apps.core.mail_service import MailService
from apps.identity.services import find_super_admin_emails
from apps.organizations.models import Organization
from apps.organization_requests.models import RequestStatus
from .dtos import ApplicationIn, ApplicationUpdateIn
from .errors import APPLICATION_ERRORS, APPLICATION_REQUEST_ERRORS, ORGANIZATION_APPLICATION_ERRORS
from .models import (
    Application, ApplicationRequest, ApplicationStatus, ApplicationType,
    OrganizationApplication, OrganizationApplicationStatus,
)

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


class ApplicationService:

    def __init__(self, file_manager: Optional[FileManagerService] = None):
        self.file_manager = file_manager or FileManagerService()

    # =========================================================================
    # Catalog
    # =========================================================================

    def create(self, payload: ApplicationIn, logo: Optional[UploadedFile] = None) -> Application:
        if payload.type != ApplicationType.INDEPENDENT and not payload.login_link:
            raise BadRequestError.from_catalog(APPLICATION_ERRORS['LOGIN'])

        try:
            with transaction.atomic():
                application = Application.objects.create(**payload.model_dump())
        except IntegrityError as e:
            raise BadRequestError.from_catalog(APPLICATION_ERRORS['ALREADY_EXISTS']) from e

        if logo:
            application.logo = self._upload_logo(application, logo)
            application.save(update_fields=['logo', 'updated_at'])

        logger.info(f"Application {application.id} ({application.name}) created")
        return self._with_logo_url(application)

    def find_one(self, application_id) -> Application:
        application = Application.objects.filter(id=application_id).first()
        if not application:
            raise NotFoundError.from_catalog(APPLICATION_ERRORS['GET'])
        return self._with_logo_url(application)

    def find_all(
        self,
        search: Optional[str] = None,
        type: Optional[str] = None,
        status: Optional[str] = None,
        page: int = 1,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> dict:
        applications = Application.objects.all()
        if search:
            applications = applications.filter(Q(name__icontains=search) | Q(short_description__icontains=search))
        if type:
            applications = applications.filter(type=type)
        if status:
            applications = applications.filter(status=status)

        page = max(page, 1)
        page_size = max(1, min(page_size, MAX_PAGE_SIZE))
        offset = (page - 1) * page_size
        return {
            'items': [self._with_logo_url(app) for app in applications[offset:offset + page_size]],
            'total': applications.count(),
            'page': page,
            'page_size': page_size,
        }

    def update(self, application_id, payload: ApplicationUpdateIn, logo: Optional[UploadedFile] = None) -> Application:
        application = self.find_one(application_id)

        for attr, value in payload.model_dump(exclude_unset=True).items():
            setattr(application, attr, value)
        if application.type != ApplicationType.INDEPENDENT and not application.login_link:
            raise BadRequestError.from_catalog(APPLICATION_ERRORS['LOGIN'])

        if logo:
            self._delete_logo(application)
            application.logo = self._upload_logo(application, logo)

        try:
            with transaction.atomic():
                application.save()
        except IntegrityError as e:
            raise BadRequestError.from_catalog(APPLICATION_ERRORS['ALREADY_EXISTS']) from e
        return self._with_logo_url(application)

    def delete(self, application_id) -> None:
        """Remove the application together with every organization link and request."""
        application = self.find_one(application_id)
        logo = application.logo
        try:
            with transaction.atomic():
                OrganizationApplication.objects.filter(application=application).delete()
                ApplicationRequest.objects.filter(application=application).delete()
                application.delete()
        except DatabaseError as e:
            logger.exception(f"Could not delete application {application_id}: {e}")
            raise InternalServerError.from_catalog(APPLICATION_ERRORS['DELETE']) from e

        if logo:
            try:
                self.file_manager.delete_files([logo])
            except FileUploadError as e:
                logger.error(f"Application {application_id} deleted but its logo remains: {e.message}")

    def _upload_logo(self, application: Application, logo: UploadedFile) -> str:
        try:
            return self.file_manager.upload_files(f"applications/{application.id}", [logo], FileType.IMAGE)[0]
        except FileUploadError as e:
            logger.error(f"Logo upload failed for application {application.id}: {e.message}")
            if e.kind == FileUploadError.UPLOAD:
                raise InternalServerError.from_catalog(APPLICATION_ERRORS['UPLOAD']) from e
            raise BadRequestError(e.message, APPLICATION_ERRORS['UPLOAD']['errorCode']) from e

    def _delete_logo(self, application: Application) -> None:
        if not application.logo:
            return
        try:
            self.file_manager.delete_files([application.logo])
        except FileUploadError as e:
            raise InternalServerError.from_catalog(APPLICATION_ERRORS['UPLOAD']) from e

    def _with_logo_url(self, application: Application) -> Application:
        application.logo_url = self.file_manager.generate_presigned_url(application.logo)
        return application

    # =========================================================================
    # Organization access
    # =========================================================================

    def find_for_organization(self, organization_id) -> List[OrganizationApplication]:
        links = OrganizationApplication.objects.filter(
            organization_id=organization_id,
        ).select_related('application').order_by('application__name')
        for link in links:
            self._with_logo_url(link.application)
        return list(links)

    def restrict(self, application_id, organization_id, performed_by=None) -> OrganizationApplication:
        link = self._get_link(application_id, organization_id)
        link.status = OrganizationApplicationStatus.RESTRICTED
        link.save(update_fields=['status', 'updated_at'])
        self._audit(link, AuditAction.RESTRICT_APPLICATION, performed_by)
        return link

    def restore(self, application_id, organization_id, performed_by=None) -> OrganizationApplication:
        link = self._get_link(application_id, organization_id)
        if link.status != OrganizationApplicationStatus.RESTRICTED:
            raise BadRequestError.from_catalog(ORGANIZATION_APPLICATION_ERRORS['RESTORE'])
        link.status = OrganizationApplicationStatus.ACTIVE
        link.save(update_fields=['status', 'updated_at'])
        self._audit(link, AuditAction.RESTORE_APPLICATION, performed_by)
        return link

    def count_active_applications(self) -> int:
        return Application.objects.filter(status=ApplicationStatus.ACTIVE).count()

    def count_active_for_organization(self, organization_id) -> int:
        """ACTIVE links to ACTIVE applications."""
        return OrganizationApplication.objects.filter(
            organization_id=organization_id,
            status=OrganizationApplicationStatus.ACTIVE,
            application__status=ApplicationStatus.ACTIVE,
        ).count()

    def _get_link(self, application_id, organization_id) -> OrganizationApplication:
        link = OrganizationApplication.objects.select_related('application').filter(
            application_id=application_id, organization_id=organization_id,
        ).first()
        if not link:
            raise NotFoundError.from_catalog(ORGANIZATION_APPLICATION_ERRORS['GET'])
        return link

    def _audit(self, link: OrganizationApplication, action: str, performed_by) -> None:
        log_action(
            org_id=link.organization_id,
            action=action,
            target_type="Application",
            target_id=link.application_id,
            target_label=link.application.name,
            performed_by=performed_by,
        )


class ApplicationRequestService:

    def __init__(self, mail_service: Optional[MailService] = None):
        self.mail_service = mail_service or MailService()

    def create(self, organization_id, application_id) -> ApplicationRequest:
        application = Application.objects.filter(id=application_id).first()
        if not application:
            raise NotFoundError.from_catalog(APPLICATION_ERRORS['GET'])
        if application.status != ApplicationStatus.ACTIVE:
            raise BadRequestError.from_catalog(APPLICATION_REQUEST_ERRORS['APPLICATION_STATUS'])
        if application.type == ApplicationType.INDEPENDENT:
            raise BadRequestError.from_catalog(APPLICATION_REQUEST_ERRORS['APPLICATION_TYPE'])

        if ApplicationRequest.objects.filter(
            organization_id=organization_id, application=application, status=RequestStatus.PENDING,
        ).exists():
            raise BadRequestError.from_catalog(APPLICATION_REQUEST_ERRORS['REQ_EXISTS'])
        if OrganizationApplication.objects.filter(organization_id=organization_id, application=application).exists():
            raise BadRequestError.from_catalog(APPLICATION_REQUEST_ERRORS['APP_EXISTS'])

        try:
            request = ApplicationRequest.objects.create(organization_id=organization_id, application=application)
        except DatabaseError as e:
            logger.exception(f"Could not store application request: {e}")
            raise InternalServerError.from_catalog(APPLICATION_REQUEST_ERRORS['CREATE']) from e

        logger.info(f"Organization {organization_id} requested access to {application.name}")
        self._notify_super_admins(organization_id, application)
        return request

    def find_all(self, status: Optional[str] = None) -> List[ApplicationRequest]:
        requests = ApplicationRequest.objects.all()
        if status:
            requests = requests.filter(status=status)
        return list(requests)

    def find_one(self, request_id) -> ApplicationRequest:
        request = ApplicationRequest.objects.select_related('application').filter(id=request_id).first()
        if not request:
            raise NotFoundError.from_catalog(APPLICATION_REQUEST_ERRORS['NOT_FOUND'])
        return request

    def approve(self, request_id, performed_by=None) -> ApplicationRequest:
        request = self._find_pending(request_id)
        try:
            with transaction.atomic():
                OrganizationApplication.objects.create(
                    organization_id=request.organization_id,
                    application_id=request.application_id,
                    status=OrganizationApplicationStatus.ACTIVE,
                )
                request.status = RequestStatus.APPROVED
                request.save(update_fields=['status', 'updated_at'])
        except DatabaseError as e:
            logger.exception(f"Could not approve application request {request_id}: {e}")
            raise InternalServerError.from_catalog(APPLICATION_REQUEST_ERRORS['UPDATE']) from e

        self._audit(request, AuditAction.APPROVE_APPLICATION_REQUEST, performed_by)
        return request

    def reject(self, request_id, performed_by=None) -> ApplicationRequest:
        request = self._find_pending(request_id)
        request.status = RequestStatus.DECLINED
        request.save(update_fields=['status', 'updated_at'])
        self._audit(request, AuditAction.REJECT_APPLICATION_REQUEST, performed_by)
        return request

    def _find_pending(self, request_id) -> ApplicationRequest:
        request = self.find_one(request_id)
        if request.status != RequestStatus.PENDING:
            raise BadRequestError.from_catalog(APPLICATION_REQUEST_ERRORS['NOT_PENDING'])
        return request

    def _audit(self, request: ApplicationRequest, action: str, performed_by) -> None:
        log_action(
            org_id=request.organization_id,
            action=action,
            target_type="ApplicationRequest",
            target_id=request.id,
            target_label=request.application.name,
            performed_by=performed_by,
        )

    def _notify_super_admins(self, organization_id, application: Application) -> None:
        organization_name = Organization.objects.filter(
            id=organization_id,
        ).values_list('organization_general__name', flat=True).first()
        self.mail_service.send_email(
            to=find_super_admin_emails(),
            subject=f"Cerere de acces la {application.name}",
            template='emails/organization_request.html',
            context={
                'title': f"Cerere de acces la {application.name}",
                'subtitle': "O organizație a solicitat acces la o aplicație din ONG Hub.",
                'organization_name': organization_name,
            },
        )
