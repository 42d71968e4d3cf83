from django.contrib import admin
from .models import OrganizationRequest


@admin.register(OrganizationRequest)
class OrganizationRequestAdmin(admin.ModelAdmin):
    list_display = ['organization_name', 'name', 'email', 'status', 'created_at']
    list_filter = ['status']
    search_fields = ['organization_name', 'name', 'email']
