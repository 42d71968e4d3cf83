from typing import Optional
from ninja import Schema
from ninja.orm import create_schema

from .models import City, Coalition, County, Domain, Federation, Region

CountyOut = create_schema(County)
RegionOut = create_schema(Region)
DomainOut = create_schema(Domain)
FederationOut = create_schema(Federation)
CoalitionOut = create_schema(Coalition)


class CityOut(Schema):
    id: int
    name: str
    county: Optional[CountyOut] = None
