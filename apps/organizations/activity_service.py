"""
Organization activity sub-service.

Owns the operating-scope rules:
- LOCAL needs cities (regions cleared), REGIONAL needs regions (cities
  cleared), NATIONAL/INTERNATIONAL clear both.
- Membership flags set to true need at least one source list; set to
  false they clear the list.
- The international organization name only survives while its flag is on.
"""
import logging
from typing import Optional

from django.db import transaction

from apps.core.exceptions import BadRequestError
from apps.nomenclatures import services as nomenclatures
from .dtos import ActivityIn, ActivityUpdateIn
from .errors import ORGANIZATION_ERRORS
from .models import Area, OrganizationActivity

logger = logging.getLogger(__name__)

FLAG_FIELDS = [
    'is_social_service_viable',
    'offers_grants',
    'is_public_interest_organization',
]


def _has_names(names) -> bool:
    return any((name or '').strip() for name in names or [])


def validate_activity(data: dict, current: Optional[OrganizationActivity] = None) -> None:
    """
    Raise BadRequestError for the first missing conditional field.
    `data` holds only the submitted keys; `current` supplies the rest.
    """
    area = data.get('area')
    if area == Area.LOCAL and not data.get('cities'):
        raise BadRequestError.from_catalog(ORGANIZATION_ERRORS['LOCAL'])
    if area == Area.REGIONAL and not data.get('regions'):
        raise BadRequestError.from_catalog(ORGANIZATION_ERRORS['REGION'])

    if data.get('is_part_of_federation') is True:
        if not data.get('federations') and not _has_names(data.get('new_federations')):
            raise BadRequestError.from_catalog(ORGANIZATION_ERRORS['FEDERATIONS'])

    if data.get('is_part_of_coalition') is True:
        if not data.get('coalitions') and not _has_names(data.get('new_coalitions')):
            raise BadRequestError.from_catalog(ORGANIZATION_ERRORS['COALITIONS'])

    if data.get('has_branches') is True and not data.get('branches'):
        raise BadRequestError.from_catalog(ORGANIZATION_ERRORS['BRANCHES'])

    is_international = data.get(
        'is_part_of_international_organization',
        current.is_part_of_international_organization if current else False,
    )
    if is_international:
        name = data.get(
            'international_organization_name',
            current.international_organization_name if current else None,
        )
        if not (name or '').strip():
            raise BadRequestError.from_catalog(ORGANIZATION_ERRORS['INTERNATIONAL_ORGANIZATION'])


class OrganizationActivityService:

    def create(self, payload: ActivityIn) -> OrganizationActivity:
        data = payload.model_dump()
        validate_activity(data)
        activity = OrganizationActivity.objects.create(area=data['area'])
        self._apply(activity, data)
        return activity

    def update(self, activity: OrganizationActivity, payload: ActivityUpdateIn) -> OrganizationActivity:
        data = payload.model_dump(exclude_unset=True)
        validate_activity(data, current=activity)

        with transaction.atomic():
            self._apply(activity, data)

        return self.get_with_relations(activity.id)

    def get_with_relations(self, activity_id) -> OrganizationActivity:
        return OrganizationActivity.objects.prefetch_related(
            'branches__county', 'domains', 'cities__county', 'federations', 'coalitions', 'regions',
        ).get(id=activity_id)

    def _apply(self, activity: OrganizationActivity, data: dict) -> None:
        if data.get('domains') is not None:
            activity.domains.set(nomenclatures.get_domains(data['domains']))

        area = data.get('area')
        if area:
            activity.area = area
            if area == Area.LOCAL:
                activity.cities.set(nomenclatures.get_cities(ids=data['cities']))
                activity.regions.clear()
            elif area == Area.REGIONAL:
                activity.regions.set(nomenclatures.get_regions(data['regions']))
                activity.cities.clear()
            else:
                activity.cities.clear()
                activity.regions.clear()

        if 'is_part_of_federation' in data and data['is_part_of_federation'] is not None:
            activity.is_part_of_federation = data['is_part_of_federation']
            if activity.is_part_of_federation:
                federations = nomenclatures.get_federations(data.get('federations') or [])
                federations += nomenclatures.add_federations(data.get('new_federations') or [])
                activity.federations.set(federations)
            else:
                activity.federations.clear()

        if 'is_part_of_coalition' in data and data['is_part_of_coalition'] is not None:
            activity.is_part_of_coalition = data['is_part_of_coalition']
            if activity.is_part_of_coalition:
                coalitions = nomenclatures.get_coalitions(data.get('coalitions') or [])
                coalitions += nomenclatures.add_coalitions(data.get('new_coalitions') or [])
                activity.coalitions.set(coalitions)
            else:
                activity.coalitions.clear()

        if 'has_branches' in data and data['has_branches'] is not None:
            activity.has_branches = data['has_branches']
            if activity.has_branches:
                activity.branches.set(nomenclatures.get_cities(ids=data['branches']))
            else:
                activity.branches.clear()

        if data.get('is_part_of_international_organization') is not None:
            activity.is_part_of_international_organization = data['is_part_of_international_organization']
        if activity.is_part_of_international_organization:
            if 'international_organization_name' in data:
                activity.international_organization_name = data['international_organization_name']
        else:
            activity.international_organization_name = None

        for field in FLAG_FIELDS:
            if data.get(field) is not None:
                setattr(activity, field, data[field])

        activity.save()
        logger.info(f"Activity {activity.id} saved (area={activity.area})")
