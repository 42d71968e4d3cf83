"""DTOs and API schemas for the organizations app."""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Annotated, Any, Dict, List, Literal, Optional, Union
from uuid import UUID

from ninja import Schema
from pydantic import Field

from apps.nomenclatures.dtos import (
    CityOut, CountyOut, DomainOut, RegionOut, FederationOut, CoalitionOut,
)
from .models import Area, OrganizationType


@dataclass(frozen=True)
class FinancialInformation:
    """Usable ANAF figures for one organization and year."""
    total_income: Decimal
    total_expense: Decimal
    number_of_employees: int


@dataclass(frozen=True)
class ValidationErrorDTO:
    field: str
    message: str
    error_code: str


# =============================================================================
# Input schemas
# =============================================================================

class ContactIn(Schema):
    id: Optional[UUID] = None
    full_name: str
    email: Optional[str] = None
    phone: Optional[str] = None


class GeneralIn(Schema):
    name: str
    alias: str
    type: OrganizationType
    email: str
    phone: str
    year_created: int
    cui: str
    raf_number: str
    association_registry_number: Optional[str] = None
    association_registry_part: Optional[str] = None
    association_registry_section: Optional[str] = None
    association_registry_issuer: Optional[str] = None
    national_registry_number: Optional[str] = None
    short_description: Optional[str] = None
    description: Optional[str] = None
    address: Optional[str] = None
    city_id: Optional[int] = None
    county_id: Optional[int] = None
    organization_address: Optional[str] = None
    organization_city_id: Optional[int] = None
    organization_county_id: Optional[int] = None
    website: Optional[str] = None
    facebook: Optional[str] = None
    instagram: Optional[str] = None
    twitter: Optional[str] = None
    linkedin: Optional[str] = None
    tiktok: Optional[str] = None
    donation_website: Optional[str] = None
    redirect_link: Optional[str] = None
    donation_sms: Optional[str] = None
    donation_keyword: Optional[str] = None
    contact: ContactIn


class GeneralUpdateIn(Schema):
    """Every field optional; only the submitted ones are merged."""
    name: Optional[str] = None
    alias: Optional[str] = None
    type: Optional[OrganizationType] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    year_created: Optional[int] = None
    cui: Optional[str] = None
    raf_number: Optional[str] = None
    association_registry_number: Optional[str] = None
    association_registry_part: Optional[str] = None
    association_registry_section: Optional[str] = None
    association_registry_issuer: Optional[str] = None
    national_registry_number: Optional[str] = None
    short_description: Optional[str] = None
    description: Optional[str] = None
    address: Optional[str] = None
    city_id: Optional[int] = None
    county_id: Optional[int] = None
    organization_address: Optional[str] = None
    organization_city_id: Optional[int] = None
    organization_county_id: Optional[int] = None
    website: Optional[str] = None
    facebook: Optional[str] = None
    instagram: Optional[str] = None
    twitter: Optional[str] = None
    linkedin: Optional[str] = None
    tiktok: Optional[str] = None
    donation_website: Optional[str] = None
    redirect_link: Optional[str] = None
    donation_sms: Optional[str] = None
    donation_keyword: Optional[str] = None
    contact: Optional[ContactIn] = None


class ActivityIn(Schema):
    area: Area
    domains: List[int] = []
    cities: List[int] = []
    regions: List[int] = []
    is_part_of_federation: bool = False
    federations: List[int] = []
    new_federations: List[str] = []
    is_part_of_coalition: bool = False
    coalitions: List[int] = []
    new_coalitions: List[str] = []
    is_part_of_international_organization: bool = False
    international_organization_name: Optional[str] = None
    is_social_service_viable: bool = False
    offers_grants: bool = False
    is_public_interest_organization: bool = False
    has_branches: bool = False
    branches: List[int] = []


class ActivityUpdateIn(Schema):
    area: Optional[Area] = None
    domains: Optional[List[int]] = None
    cities: Optional[List[int]] = None
    regions: Optional[List[int]] = None
    is_part_of_federation: Optional[bool] = None
    federations: Optional[List[int]] = None
    new_federations: Optional[List[str]] = None
    is_part_of_coalition: Optional[bool] = None
    coalitions: Optional[List[int]] = None
    new_coalitions: Optional[List[str]] = None
    is_part_of_international_organization: Optional[bool] = None
    international_organization_name: Optional[str] = None
    is_social_service_viable: Optional[bool] = None
    offers_grants: Optional[bool] = None
    is_public_interest_organization: Optional[bool] = None
    has_branches: Optional[bool] = None
    branches: Optional[List[int]] = None


class LegalIn(Schema):
    legal_representative: ContactIn
    directors: List[ContactIn]
    other_information: List[Dict[str, Any]] = []


class LegalUpdateIn(Schema):
    legal_representative: Optional[ContactIn] = None
    directors: Optional[List[ContactIn]] = None
    other_information: Optional[List[Dict[str, Any]]] = None
    delete_statute: bool = False


class FinancialUpdateIn(Schema):
    id: UUID
    data: Dict[str, Any]


class ReportUpdateIn(Schema):
    report_id: UUID
    report: Optional[str] = None
    number_of_volunteers: Optional[int] = None
    number_of_contractors: Optional[int] = None


class OrganizationCreateIn(Schema):
    general: GeneralIn
    activity: ActivityIn
    legal: LegalIn


# Sectioned update: exactly one section per call, tagged by `section`

class GeneralSection(Schema):
    section: Literal['general']
    general: GeneralUpdateIn


class ActivitySection(Schema):
    section: Literal['activity']
    activity: ActivityUpdateIn


class LegalSection(Schema):
    section: Literal['legal']
    legal: LegalUpdateIn


class FinancialSection(Schema):
    section: Literal['financial']
    financial: FinancialUpdateIn


class ReportSection(Schema):
    section: Literal['report']
    report: ReportUpdateIn


OrganizationUpdate = Annotated[
    Union[GeneralSection, ActivitySection, LegalSection, FinancialSection, ReportSection],
    Field(discriminator='section'),
]


class ValidateGeneralIn(Schema):
    cui: Optional[str] = None
    raf_number: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    alias: Optional[str] = None


class ListUploadIn(Schema):
    number_of_partners: Optional[int] = None
    number_of_investors: Optional[int] = None


# =============================================================================
# Output schemas
# =============================================================================

class ContactOut(Schema):
    id: UUID
    full_name: str
    email: Optional[str] = None
    phone: Optional[str] = None


class GeneralOut(Schema):
    id: UUID
    name: str
    alias: str
    type: str
    email: str
    phone: str
    year_created: int
    cui: str
    raf_number: str
    association_registry_number: Optional[str] = None
    association_registry_part: Optional[str] = None
    association_registry_section: Optional[str] = None
    association_registry_issuer: Optional[str] = None
    national_registry_number: Optional[str] = None
    short_description: Optional[str] = None
    description: Optional[str] = None
    address: Optional[str] = None
    city: Optional[CityOut] = None
    county: Optional[CountyOut] = None
    organization_address: Optional[str] = None
    organization_city: Optional[CityOut] = None
    organization_county: Optional[CountyOut] = None
    logo: Optional[str] = None
    logo_url: Optional[str] = None
    website: Optional[str] = None
    facebook: Optional[str] = None
    instagram: Optional[str] = None
    twitter: Optional[str] = None
    linkedin: Optional[str] = None
    tiktok: Optional[str] = None
    donation_website: Optional[str] = None
    redirect_link: Optional[str] = None
    donation_sms: Optional[str] = None
    donation_keyword: Optional[str] = None
    contact: ContactOut


class ActivityOut(Schema):
    id: UUID
    area: str
    domains: List[DomainOut] = []
    cities: List[CityOut] = []
    regions: List[RegionOut] = []
    is_part_of_federation: bool
    federations: List[FederationOut] = []
    is_part_of_coalition: bool
    coalitions: List[CoalitionOut] = []
    is_part_of_international_organization: bool
    international_organization_name: Optional[str] = None
    is_social_service_viable: bool
    offers_grants: bool
    is_public_interest_organization: bool
    has_branches: bool
    branches: List[CityOut] = []


class LegalOut(Schema):
    id: UUID
    legal_representative: Optional[ContactOut] = None
    directors: List[ContactOut] = []
    other_information: List[Dict[str, Any]] = []
    organization_statute: Optional[str] = None
    organization_statute_url: Optional[str] = None


class FinancialOut(Schema):
    id: UUID
    type: str
    year: int
    number_of_employees: int
    total: Decimal
    data: Optional[Dict[str, Any]] = None
    synched_anaf: bool
    status: str
    report_status: str


class ReportOut(Schema):
    id: UUID
    year: int
    report: Optional[str] = None
    number_of_volunteers: Optional[int] = None
    number_of_contractors: Optional[int] = None
    status: str


class PartnerOut(Schema):
    id: UUID
    year: int
    number_of_partners: Optional[int] = None
    path: Optional[str] = None
    status: str


class InvestorOut(Schema):
    id: UUID
    year: int
    number_of_investors: Optional[int] = None
    path: Optional[str] = None
    status: str


class OrganizationReportOut(Schema):
    id: UUID
    reports: List[ReportOut] = []
    partners: List[PartnerOut] = []
    investors: List[InvestorOut] = []


class OrganizationOut(Schema):
    id: UUID
    status: str
    completion_status: str
    synced_on: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    organization_general: GeneralOut
    organization_activity: ActivityOut
    organization_legal: LegalOut
    organization_financial: List[FinancialOut] = []
    organization_report: OrganizationReportOut


class OrganizationSummaryOut(Schema):
    id: UUID
    status: str
    completion_status: str
    created_at: datetime


class ValidationErrorOut(Schema):
    field: str
    message: str
    error_code: str
