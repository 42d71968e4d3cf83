from django.contrib import admin
from .models import (
    Contact, Investor, Organization, OrganizationFinancial, OrganizationGeneral, Partner, Report,
)


class OrganizationFinancialInline(admin.TabularInline):
    model = OrganizationFinancial
    extra = 0
    fields = ['year', 'type', 'total', 'number_of_employees', 'synched_anaf', 'report_status']
    readonly_fields = fields


@admin.register(Organization)
class OrganizationAdmin(admin.ModelAdmin):
    list_display = ['general_name', 'status', 'completion_status', 'synced_on', 'created_at']
    list_filter = ['status', 'completion_status']
    search_fields = ['organization_general__name', 'organization_general__cui']
    inlines = [OrganizationFinancialInline]

    @admin.display(description='Name', ordering='organization_general__name')
    def general_name(self, obj):
        return obj.organization_general.name


@admin.register(OrganizationGeneral)
class OrganizationGeneralAdmin(admin.ModelAdmin):
    list_display = ['name', 'alias', 'cui', 'raf_number', 'email']
    search_fields = ['name', 'alias', 'cui', 'raf_number']


@admin.register(Contact)
class ContactAdmin(admin.ModelAdmin):
    list_display = ['full_name', 'email', 'phone', 'deleted_on']
    search_fields = ['full_name', 'email']


admin.site.register([Report, Partner, Investor])
