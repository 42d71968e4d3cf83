from django.contrib import admin
from .models import Application, ApplicationRequest, OrganizationApplication


@admin.register(Application)
class ApplicationAdmin(admin.ModelAdmin):
    list_display = ['name', 'type', 'status', 'created_at']
    list_filter = ['type', 'status']
    search_fields = ['name']


@admin.register(OrganizationApplication)
class OrganizationApplicationAdmin(admin.ModelAdmin):
    list_display = ['application', 'organization', 'status']
    list_filter = ['status']


@admin.register(ApplicationRequest)
class ApplicationRequestAdmin(admin.ModelAdmin):
    list_display = ['application', 'organization', 'status', 'created_at']
    list_filter = ['status']
