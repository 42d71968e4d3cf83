"""
Organization legal sub-service: legal representative, directors, statute.
"""
import logging
from typing import List, Optional

from django.core.files.uploadedfile import UploadedFile
from django.db import transaction

from apps.core.exceptions import BadRequestError
from apps.core.file_manager_service import FileManagerService, FileType, FileUploadError
from .dtos import ContactIn, LegalIn, LegalUpdateIn
from .errors import ORGANIZATION_ERRORS, upload_error_to_service_error
from .general_service import merge_contact
from .models import Contact, Organization, OrganizationLegal

logger = logging.getLogger(__name__)

MIN_DIRECTORS = 3
STATUTE_DIR = 'statute'


def validate_directors(directors: List[ContactIn]) -> None:
    if len(directors or []) < MIN_DIRECTORS:
        raise BadRequestError.from_catalog(ORGANIZATION_ERRORS['DIRECTORS_MIN'])


class OrganizationLegalService:

    def __init__(self, file_manager: Optional[FileManagerService] = None):
        self.file_manager = file_manager or FileManagerService()

    def create(self, payload: LegalIn) -> OrganizationLegal:
        validate_directors(payload.directors)

        representative = Contact.objects.create(**payload.legal_representative.model_dump(exclude={'id'}))
        legal = OrganizationLegal.objects.create(
            legal_representative=representative,
            other_information=payload.other_information,
        )
        legal.directors.set([
            Contact.objects.create(**director.model_dump(exclude={'id'}))
            for director in payload.directors
        ])
        return legal

    def update(
        self,
        organization: Organization,
        payload: LegalUpdateIn,
        statute: Optional[UploadedFile] = None,
    ) -> OrganizationLegal:
        legal = organization.organization_legal

        with transaction.atomic():
            if payload.legal_representative is not None:
                if legal.legal_representative_id:
                    merge_contact(legal.legal_representative, payload.legal_representative)
                else:
                    legal.legal_representative = Contact.objects.create(
                        **payload.legal_representative.model_dump(exclude={'id'})
                    )

            if payload.directors is not None:
                self._replace_directors(legal, payload.directors)

            if payload.other_information is not None:
                legal.other_information = payload.other_information

            if payload.delete_statute and legal.organization_statute and not statute:
                self._delete_statute(legal)

            if statute:
                legal.organization_statute = self.replace_statute(organization, legal.organization_statute, statute)

            legal.save()

        legal = OrganizationLegal.objects.select_related('legal_representative').prefetch_related('directors').get(id=legal.id)
        legal.organization_statute_url = self.file_manager.generate_presigned_url(legal.organization_statute)
        return legal

    def replace_statute(self, organization: Organization, current_key: Optional[str], statute: UploadedFile) -> str:
        try:
            if current_key:
                self.file_manager.delete_files([current_key])
            keys = self.file_manager.upload_files(f"{organization.id}/{STATUTE_DIR}", [statute], FileType.DOCUMENT)
        except FileUploadError as e:
            logger.error(f"Statute upload failed for organization {organization.id}: {e.message}")
            raise upload_error_to_service_error(e) from e
        return keys[0]

    def _delete_statute(self, legal: OrganizationLegal) -> None:
        try:
            self.file_manager.delete_files([legal.organization_statute])
        except FileUploadError as e:
            raise upload_error_to_service_error(e) from e
        legal.organization_statute = None

    def _replace_directors(self, legal: OrganizationLegal, directors: List[ContactIn]) -> None:
        """
        Directors with an id are updated, without one are created, and the
        ones no longer listed are detached and soft-deleted.
        """
        current = {contact.id: contact for contact in legal.directors.all()}
        kept = []
        for director in directors:
            if director.id and director.id in current:
                kept.append(merge_contact(current.pop(director.id), director))
            else:
                kept.append(Contact.objects.create(**director.model_dump(exclude={'id'})))

        for removed in current.values():
            removed.soft_delete()
        legal.directors.set(kept)
