"""
Nomenclature provider.

Resolves reference lists by id and creates ad-hoc federations and
coalitions. Other apps should go through these functions instead of
querying the models directly.
"""
import logging
from typing import Iterable, List, Optional

from django.db import IntegrityError, transaction

from .models import City, Coalition, County, Domain, Federation, Region

logger = logging.getLogger(__name__)

MAX_CITY_RESULTS = 100


def get_cities(ids: Optional[Iterable[int]] = None, search: Optional[str] = None,
               county_id: Optional[int] = None) -> List[City]:
    queryset = City.objects.select_related('county')
    if ids is not None:
        return list(queryset.filter(id__in=list(ids)))

    if county_id:
        queryset = queryset.filter(county_id=county_id)
    if search:
        queryset = queryset.filter(name__icontains=search.strip())
    return list(queryset[:MAX_CITY_RESULTS])


def get_counties(ids: Optional[Iterable[int]] = None) -> List[County]:
    queryset = County.objects.all()
    if ids is not None:
        queryset = queryset.filter(id__in=list(ids))
    return list(queryset)


def get_regions(ids: Optional[Iterable[int]] = None) -> List[Region]:
    queryset = Region.objects.all()
    if ids is not None:
        queryset = queryset.filter(id__in=list(ids))
    return list(queryset)


def get_domains(ids: Optional[Iterable[int]] = None) -> List[Domain]:
    queryset = Domain.objects.all()
    if ids is not None:
        queryset = queryset.filter(id__in=list(ids))
    return list(queryset)


def get_federations(ids: Optional[Iterable[int]] = None) -> List[Federation]:
    queryset = Federation.objects.all()
    if ids is not None:
        queryset = queryset.filter(id__in=list(ids))
    return list(queryset)


def get_coalitions(ids: Optional[Iterable[int]] = None) -> List[Coalition]:
    queryset = Coalition.objects.all()
    if ids is not None:
        queryset = queryset.filter(id__in=list(ids))
    return list(queryset)


def add_federations(names: Iterable[str]) -> List[Federation]:
    return _upsert_by_name(Federation, names)


def add_coalitions(names: Iterable[str]) -> List[Coalition]:
    return _upsert_by_name(Coalition, names)


def _upsert_by_name(model, names: Iterable[str]) -> list:
    """
    get_or_create each distinct, non-blank name, matched case-insensitively.
    A concurrent insert of the same name hits the unique constraint and is
    resolved by re-reading.
    """
    seen = set()
    entries = []
    for raw in names:
        name = (raw or '').strip()
        if not name or name.lower() in seen:
            continue
        seen.add(name.lower())

        try:
            with transaction.atomic():
                entry, created = model.objects.get_or_create(name__iexact=name, defaults={'name': name})
        except IntegrityError:
            entry, created = model.objects.get(name__iexact=name), False
        if created:
            logger.info(f"Created {model.__name__} '{name}'")
        entries.append(entry)
    return entries
