from django.contrib import admin
from .models import City, Coalition, County, Domain, Federation, Region


@admin.register(County)
class CountyAdmin(admin.ModelAdmin):
    list_display = ['name', 'abbreviation', 'region_code']
    search_fields = ['name']


@admin.register(City)
class CityAdmin(admin.ModelAdmin):
    list_display = ['name', 'county']
    list_filter = ['county']
    search_fields = ['name']


admin.site.register([Region, Domain, Federation, Coalition])
