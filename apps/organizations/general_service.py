"""
Organization general (public profile) sub-service.
"""
import logging
import re
from typing import Optional

from django.core.files.uploadedfile import UploadedFile
from django.db import transaction

from apps.core.file_manager_service import FileManagerService, FileType, FileUploadError
from .dtos import ContactIn, GeneralIn, GeneralUpdateIn
from .errors import upload_error_to_service_error
from .models import Contact, Organization, OrganizationGeneral

logger = logging.getLogger(__name__)

LOGO_DIR = 'logo'


def normalize_phone(phone: Optional[str]) -> Optional[str]:
    """
    Romanian numbers to E.164: "0722 123 456" -> "+40722123456".
    Anything already international is returned without separators.
    """
    if not phone:
        return phone
    digits = re.sub(r'[\s\-().]', '', phone)
    if digits.startswith('+'):
        return digits
    if digits.startswith('0040'):
        return f"+{digits[2:]}"
    if digits.startswith('40') and len(digits) == 11:
        return f"+{digits}"
    if digits.startswith('0'):
        return f"+40{digits[1:]}"
    return digits


def merge_contact(contact: Contact, payload: ContactIn) -> Contact:
    data = payload.model_dump(exclude_unset=True, exclude={'id'})
    for attr, value in data.items():
        setattr(contact, attr, value)
    contact.save()
    return contact


class OrganizationGeneralService:

    def __init__(self, file_manager: Optional[FileManagerService] = None):
        self.file_manager = file_manager or FileManagerService()

    def create(self, payload: GeneralIn) -> OrganizationGeneral:
        data = payload.model_dump(exclude={'contact'})
        data['phone'] = normalize_phone(data['phone'])
        contact = Contact.objects.create(**payload.contact.model_dump(exclude={'id'}))
        return OrganizationGeneral.objects.create(contact=contact, **data)

    def update(
        self,
        organization: Organization,
        payload: GeneralUpdateIn,
        logo: Optional[UploadedFile] = None,
    ) -> OrganizationGeneral:
        general = organization.organization_general
        data = payload.model_dump(exclude_unset=True, exclude={'contact'})
        if data.get('phone'):
            data['phone'] = normalize_phone(data['phone'])

        with transaction.atomic():
            if payload.contact is not None:
                merge_contact(general.contact, payload.contact)

            for attr, value in data.items():
                setattr(general, attr, value)

            if logo:
                general.logo = self.replace_logo(organization, general.logo, logo)

            general.save()

        general = OrganizationGeneral.objects.select_related(
            'city__county', 'county', 'organization_city__county', 'organization_county', 'contact',
        ).get(id=general.id)
        general.logo_url = self.file_manager.generate_presigned_url(general.logo)
        return general

    def replace_logo(self, organization: Organization, current_key: Optional[str], logo: UploadedFile) -> str:
        """Delete the previous logo, upload the new one and return its key."""
        try:
            if current_key:
                self.file_manager.delete_files([current_key])
            keys = self.file_manager.upload_files(f"{organization.id}/{LOGO_DIR}", [logo], FileType.IMAGE)
        except FileUploadError as e:
            logger.error(f"Logo upload failed for organization {organization.id}: {e.message}")
            raise upload_error_to_service_error(e) from e
        return keys[0]
