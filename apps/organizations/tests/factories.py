"""Shared builders for the organization tests."""
from unittest.mock import MagicMock
from uuid import uuid4

from django.contrib.auth import get_user_model

from apps.core.file_manager_service import FileManagerService
from apps.identity.models import UserRole
from apps.nomenclatures.models import City, County
from apps.organizations.dtos import OrganizationCreateIn
from apps.organizations.financial_service import OrganizationFinancialService
from apps.organizations.services import OrganizationService

User = get_user_model()

CITY_ID = 7


def make_user(role=UserRole.SUPER_ADMIN, org_id=None, username=None):
    username = username or f"user_{uuid4().hex[:8]}"
    return User.objects.create_user(
        username=username,
        email=f"{username}@test.ro",
        password="testpass123",
        org_id=org_id,
        role=role,
    )


def make_city(city_id=CITY_ID):
    county, _ = County.objects.get_or_create(name="Cluj", defaults={'abbreviation': 'CJ'})
    city, _ = City.objects.get_or_create(id=city_id, defaults={'name': "Cluj-Napoca", 'county': county})
    return city


def anaf_indicators(income=1000, expense=800, employees=4):
    return [
        {'indicator': 'I38', 'val_indicator': income},
        {'indicator': 'I40', 'val_indicator': expense},
        {'indicator': 'I46', 'val_indicator': employees},
    ]


def fake_anaf(indicators=None, error=None):
    anaf = MagicMock()
    if error is not None:
        anaf.get_financial_information.side_effect = error
    else:
        anaf.get_financial_information.return_value = indicators
    return anaf


def fake_storage():
    storage = MagicMock()
    storage.save.side_effect = lambda name, file: name
    storage.url.side_effect = lambda key, **kwargs: f"https://files.test/{key}"
    return storage


def make_service(anaf=None, storage=None, mail_service=None, anaf_required_on_create=False):
    """OrganizationService wired to fake ANAF and storage gateways."""
    file_manager = FileManagerService(storage=storage or fake_storage())
    return OrganizationService(
        financial_service=OrganizationFinancialService(anaf or fake_anaf(anaf_indicators())),
        file_manager=file_manager,
        mail_service=mail_service,
        anaf_required_on_create=anaf_required_on_create,
    )


def create_payload(suffix="1", directors=3, **activity):
    city = make_city()
    activity_data = {'area': 'LOCAL', 'cities': [city.id]}
    activity_data.update(activity)
    return OrganizationCreateIn.model_validate({
        'general': {
            'name': f"Asociatia Test {suffix}",
            'alias': f"test-{suffix}",
            'type': 'ASSOCIATION',
            'email': f"contact{suffix}@ngo.ro",
            'phone': f"0722 000 00{suffix}",
            'year_created': 2010,
            'cui': f"RO1234{suffix}",
            'raf_number': f"RAF-{suffix}",
            'city_id': city.id,
            'county_id': city.county_id,
            'contact': {'full_name': "Maria Ionescu", 'email': f"maria{suffix}@ngo.ro", 'phone': "0744111222"},
        },
        'activity': activity_data,
        'legal': {
            'legal_representative': {'full_name': "Ion Popescu", 'email': "ion@ngo.ro"},
            'directors': [
                {'full_name': f"Director {index}"} for index in range(directors)
            ],
        },
    })


def create_organization(service=None, suffix="1", **activity):
    service = service or make_service()
    return service.create(create_payload(suffix, **activity))
