from typing import List, Optional
from ninja import Router
from django.http import HttpRequest

from . import services
from .dtos import CityOut, CountyOut, RegionOut, DomainOut, FederationOut, CoalitionOut

router = Router(tags=["Nomenclatures"])


@router.get("/cities", response=List[CityOut], auth=None)
def list_cities(request: HttpRequest, search: Optional[str] = None, county_id: Optional[int] = None):
    return services.get_cities(search=search, county_id=county_id)


@router.get("/counties", response=List[CountyOut], auth=None)
def list_counties(request: HttpRequest):
    return services.get_counties()


@router.get("/regions", response=List[RegionOut], auth=None)
def list_regions(request: HttpRequest):
    return services.get_regions()


@router.get("/domains", response=List[DomainOut], auth=None)
def list_domains(request: HttpRequest):
    return services.get_domains()


@router.get("/federations", response=List[FederationOut], auth=None)
def list_federations(request: HttpRequest):
    return services.get_federations()


@router.get("/coalitions", response=List[CoalitionOut], auth=None)
def list_coalitions(request: HttpRequest):
    return services.get_coalitions()
