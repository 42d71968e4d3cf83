from datetime import datetime
from typing import Optional
from uuid import UUID

from ninja import Schema

from apps.organizations.dtos import OrganizationCreateIn


class RequestAdminIn(Schema):
    name: str
    email: str
    phone: str


class OrganizationRequestIn(Schema):
    admin: RequestAdminIn
    organization: OrganizationCreateIn


class OrganizationRequestOut(Schema):
    id: UUID
    name: str
    email: str
    phone: str
    organization_name: str
    organization_id: Optional[UUID] = None
    status: str
    created_at: datetime
    updated_at: datetime
