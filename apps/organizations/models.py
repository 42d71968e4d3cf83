from django.db import models

from apps.core.models import BaseModel


class OrganizationStatus(models.TextChoices):
    PENDING = 'PENDING', 'Pending'
    ACTIVE = 'ACTIVE', 'Active'
    RESTRICTED = 'RESTRICTED', 'Restricted'


class CompletionStatus(models.TextChoices):
    COMPLETED = 'COMPLETED', 'Completed'
    NOT_COMPLETED = 'NOT_COMPLETED', 'Not completed'


class FinancialReportStatus(models.TextChoices):
    NOT_COMPLETED = 'NOT_COMPLETED', 'Not completed'
    PENDING = 'PENDING', 'Pending'
    COMPLETED = 'COMPLETED', 'Completed'
    INVALID = 'INVALID', 'Invalid'


class FinancialType(models.TextChoices):
    INCOME = 'Income', 'Income'
    EXPENSE = 'Expense', 'Expense'


class OrganizationType(models.TextChoices):
    ASSOCIATION = 'ASSOCIATION', 'Association'
    FOUNDATION = 'FOUNDATION', 'Foundation'
    FEDERATION = 'FEDERATION', 'Federation'


class Area(models.TextChoices):
    LOCAL = 'LOCAL', 'Local'
    REGIONAL = 'REGIONAL', 'Regional'
    NATIONAL = 'NATIONAL', 'National'
    INTERNATIONAL = 'INTERNATIONAL', 'International'


class Contact(BaseModel):
    """Person attached to an organization (general contact, legal representative, director)."""
    full_name = models.CharField(max_length=255)
    email = models.EmailField(blank=True, null=True)
    phone = models.CharField(max_length=20, blank=True, null=True)

    def __str__(self):
        return self.full_name


# =============================================================================
# Child sections (1:1 with Organization)
# =============================================================================

class OrganizationGeneral(BaseModel):
    """Public profile of an organization."""
    name = models.CharField(max_length=255, unique=True)
    alias = models.CharField(max_length=255, unique=True)
    type = models.CharField(max_length=20, choices=OrganizationType.choices)
    email = models.EmailField(unique=True)
    phone = models.CharField(max_length=20, unique=True)
    year_created = models.PositiveSmallIntegerField()
    cui = models.CharField(max_length=20, unique=True, verbose_name="CUI")
    raf_number = models.CharField(max_length=50, unique=True, verbose_name="RAF number")

    association_registry_number = models.CharField(max_length=100, blank=True, null=True)
    association_registry_part = models.CharField(max_length=100, blank=True, null=True)
    association_registry_section = models.CharField(max_length=100, blank=True, null=True)
    association_registry_issuer = models.CharField(max_length=255, blank=True, null=True)
    national_registry_number = models.CharField(max_length=100, blank=True, null=True)

    short_description = models.CharField(max_length=250, blank=True, null=True)
    description = models.TextField(blank=True, null=True)
    address = models.CharField(max_length=255, blank=True, null=True)
    city = models.ForeignKey('nomenclatures.City', on_delete=models.PROTECT, null=True, related_name='general_city+')
    county = models.ForeignKey('nomenclatures.County', on_delete=models.PROTECT, null=True, related_name='general_county+')

    # Correspondence address, when different from the registered one
    organization_address = models.CharField(max_length=255, blank=True, null=True)
    organization_city = models.ForeignKey('nomenclatures.City', on_delete=models.PROTECT, null=True, blank=True, related_name='general_organization_city+')
    organization_county = models.ForeignKey('nomenclatures.County', on_delete=models.PROTECT, null=True, blank=True, related_name='general_organization_county+')

    logo = models.CharField(max_length=500, blank=True, null=True, help_text="Storage key of the logo")
    website = models.URLField(blank=True, null=True)
    facebook = models.URLField(blank=True, null=True)
    instagram = models.URLField(blank=True, null=True)
    twitter = models.URLField(blank=True, null=True)
    linkedin = models.URLField(blank=True, null=True)
    tiktok = models.URLField(blank=True, null=True)
    donation_website = models.URLField(blank=True, null=True)
    redirect_link = models.URLField(blank=True, null=True)
    donation_sms = models.CharField(max_length=20, blank=True, null=True)
    donation_keyword = models.CharField(max_length=50, blank=True, null=True)

    contact = models.ForeignKey(Contact, on_delete=models.PROTECT, related_name='general_contact+')

    def __str__(self):
        return self.name


class OrganizationActivity(BaseModel):
    """Operating scope: area, domains, memberships, branches."""
    area = models.CharField(max_length=20, choices=Area.choices)
    domains = models.ManyToManyField('nomenclatures.Domain', blank=True, related_name='activity_domains+')
    cities = models.ManyToManyField('nomenclatures.City', blank=True, related_name='activity_cities+')
    regions = models.ManyToManyField('nomenclatures.Region', blank=True, related_name='activity_regions+')

    is_part_of_federation = models.BooleanField(default=False)
    federations = models.ManyToManyField('nomenclatures.Federation', blank=True, related_name='activity_federations+')
    is_part_of_coalition = models.BooleanField(default=False)
    coalitions = models.ManyToManyField('nomenclatures.Coalition', blank=True, related_name='activity_coalitions+')
    is_part_of_international_organization = models.BooleanField(default=False)
    international_organization_name = models.CharField(max_length=255, blank=True, null=True)

    is_social_service_viable = models.BooleanField(default=False)
    offers_grants = models.BooleanField(default=False)
    is_public_interest_organization = models.BooleanField(default=False)
    has_branches = models.BooleanField(default=False)
    branches = models.ManyToManyField('nomenclatures.City', blank=True, related_name='activity_branches+')

    class Meta:
        verbose_name_plural = "Organization activities"


class OrganizationLegal(BaseModel):
    """Governance: legal representative, board of directors, statute."""
    legal_representative = models.ForeignKey(Contact, on_delete=models.SET_NULL, null=True, related_name='legal_representative+')
    directors = models.ManyToManyField(Contact, blank=True, related_name='legal_directors+')
    other_information = models.JSONField(default=list, blank=True, help_text="Other relevant persons")
    organization_statute = models.CharField(max_length=500, blank=True, null=True, help_text="Storage key of the statute")


class OrganizationReport(BaseModel):
    """Container for the yearly open-data collections."""

    def __str__(self):
        return f"Reports {self.id}"


# =============================================================================
# Aggregate root
# =============================================================================

class Organization(BaseModel):
    """
    An NGO registered on the hub. Owns exactly one general, activity,
    legal and report section plus the yearly financial rows.
    """
    status = models.CharField(
        max_length=20,
        choices=OrganizationStatus.choices,
        default=OrganizationStatus.PENDING,
        db_index=True,
    )
    completion_status = models.CharField(
        max_length=20,
        choices=CompletionStatus.choices,
        default=CompletionStatus.NOT_COMPLETED,
    )
    synced_on = models.DateTimeField(null=True, blank=True)

    organization_general = models.OneToOneField(OrganizationGeneral, on_delete=models.PROTECT, related_name='organization')
    organization_activity = models.OneToOneField(OrganizationActivity, on_delete=models.PROTECT, related_name='organization')
    organization_legal = models.OneToOneField(OrganizationLegal, on_delete=models.PROTECT, related_name='organization')
    organization_report = models.OneToOneField(OrganizationReport, on_delete=models.PROTECT, related_name='organization')

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return self.organization_general.name


# =============================================================================
# Yearly rows
# =============================================================================

class OrganizationFinancial(BaseModel):
    """One income or expense report per organization, year and type."""
    organization = models.ForeignKey(Organization, on_delete=models.CASCADE, related_name='organization_financial')
    type = models.CharField(max_length=10, choices=FinancialType.choices)
    year = models.PositiveSmallIntegerField()
    number_of_employees = models.PositiveIntegerField(default=0)
    total = models.DecimalField(max_digits=15, decimal_places=2, default=0, help_text="Total reported by ANAF")
    data = models.JSONField(null=True, blank=True, help_text="Per-category amounts entered by the organization")
    synched_anaf = models.BooleanField(default=False)
    status = models.CharField(
        max_length=20,
        choices=CompletionStatus.choices,
        default=CompletionStatus.NOT_COMPLETED,
    )
    report_status = models.CharField(
        max_length=20,
        choices=FinancialReportStatus.choices,
        default=FinancialReportStatus.NOT_COMPLETED,
    )

    class Meta:
        ordering = ['-year', 'type']

    def __str__(self):
        return f"{self.type} {self.year}"


class Report(BaseModel):
    organization_report = models.ForeignKey(OrganizationReport, on_delete=models.CASCADE, related_name='reports')
    year = models.PositiveSmallIntegerField()
    report = models.URLField(blank=True, null=True, help_text="Link to the published activity report")
    number_of_volunteers = models.PositiveIntegerField(null=True, blank=True)
    number_of_contractors = models.PositiveIntegerField(null=True, blank=True)
    status = models.CharField(max_length=20, choices=CompletionStatus.choices, default=CompletionStatus.NOT_COMPLETED)

    class Meta:
        ordering = ['-year']


class Partner(BaseModel):
    organization_report = models.ForeignKey(OrganizationReport, on_delete=models.CASCADE, related_name='partners')
    year = models.PositiveSmallIntegerField()
    number_of_partners = models.PositiveIntegerField(null=True, blank=True)
    path = models.CharField(max_length=500, blank=True, null=True, help_text="Storage key of the partner list")
    status = models.CharField(max_length=20, choices=CompletionStatus.choices, default=CompletionStatus.NOT_COMPLETED)

    class Meta:
        ordering = ['-year']


class Investor(BaseModel):
    organization_report = models.ForeignKey(OrganizationReport, on_delete=models.CASCADE, related_name='investors')
    year = models.PositiveSmallIntegerField()
    number_of_investors = models.PositiveIntegerField(null=True, blank=True)
    path = models.CharField(max_length=500, blank=True, null=True, help_text="Storage key of the investor list")
    status = models.CharField(max_length=20, choices=CompletionStatus.choices, default=CompletionStatus.NOT_COMPLETED)

    class Meta:
        ordering = ['-year']
