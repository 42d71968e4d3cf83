from datetime import datetime
from typing import List, Optional
from uuid import UUID

from ninja import Schema

from .models import ApplicationStatus, ApplicationType


class ApplicationIn(Schema):
    name: str
    type: ApplicationType
    status: ApplicationStatus = ApplicationStatus.ACTIVE
    login_link: Optional[str] = None
    website: str
    short_description: str
    description: str
    steps: List[str] = []


class ApplicationUpdateIn(Schema):
    name: Optional[str] = None
    type: Optional[ApplicationType] = None
    status: Optional[ApplicationStatus] = None
    login_link: Optional[str] = None
    website: Optional[str] = None
    short_description: Optional[str] = None
    description: Optional[str] = None
    steps: Optional[List[str]] = None


class ApplicationOut(Schema):
    id: UUID
    name: str
    type: str
    status: str
    login_link: Optional[str] = None
    website: str
    short_description: str
    description: str
    steps: List[str] = []
    logo: Optional[str] = None
    logo_url: Optional[str] = None
    created_at: datetime


class ApplicationPage(Schema):
    items: List[ApplicationOut]
    total: int
    page: int
    page_size: int


class OrganizationApplicationOut(Schema):
    id: UUID
    organization_id: UUID
    application: ApplicationOut
    status: str


class ApplicationRequestIn(Schema):
    application_id: UUID


class ApplicationRequestOut(Schema):
    id: UUID
    organization_id: UUID
    application_id: UUID
    status: str
    created_at: datetime
    updated_at: datetime
