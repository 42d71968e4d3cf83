from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

from apps.identity.models import UserRole
from apps.nomenclatures.models import City, Coalition, County, Domain, Federation, Region

User = get_user_model()

REGIONS = ["Nord-Est", "Sud-Est", "Sud-Muntenia", "Sud-Vest Oltenia", "Vest", "Nord-Vest", "Centru", "Bucuresti-Ilfov"]

# county name, abbreviation, region, cities
COUNTIES = [
    ("Bucuresti", "B", "Bucuresti-Ilfov", ["Bucuresti"]),
    ("Cluj", "CJ", "Nord-Vest", ["Cluj-Napoca", "Turda", "Dej"]),
    ("Iasi", "IS", "Nord-Est", ["Iasi", "Pascani"]),
    ("Timis", "TM", "Vest", ["Timisoara", "Lugoj"]),
    ("Brasov", "BV", "Centru", ["Brasov", "Fagaras"]),
    ("Constanta", "CT", "Sud-Est", ["Constanta", "Mangalia"]),
    ("Dolj", "DJ", "Sud-Vest Oltenia", ["Craiova"]),
    ("Prahova", "PH", "Sud-Muntenia", ["Ploiesti"]),
]

DOMAINS = [
    "Educatie", "Sanatate", "Servicii sociale", "Mediu", "Cultura", "Drepturile omului",
    "Dezvoltare comunitara", "Sport", "Tineret", "Protectia animalelor",
]

FEDERATIONS = ["Federatia Organizatiilor Neguvernamentale pentru Servicii Sociale"]
COALITIONS = ["Coalitia pentru Educatie"]


class Command(BaseCommand):
    help = 'Seeds counties, cities, regions, domains and a super administrator.'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clean',
            action='store_true',
            help='Delete cities and counties before seeding',
        )
        parser.add_argument(
            '--admin-email',
            help='Create a super administrator with this email',
        )
        parser.add_argument(
            '--admin-password',
            default='admin',
            help='Password of the seeded super administrator',
        )

    def handle(self, *args, **options):
        if options['clean']:
            self.stdout.write(self.style.WARNING('Cleaning nomenclatures...'))
            City.objects.all().delete()
            County.objects.all().delete()

        with transaction.atomic():
            regions = {name: Region.objects.get_or_create(name=name)[0] for name in REGIONS}
            for name, abbreviation, region, cities in COUNTIES:
                county, _ = County.objects.get_or_create(
                    name=name, defaults={'abbreviation': abbreviation, 'region_code': regions[region].name},
                )
                for city in cities:
                    City.objects.get_or_create(name=city, county=county)

            for name in DOMAINS:
                Domain.objects.get_or_create(name=name)
            for name in FEDERATIONS:
                Federation.objects.get_or_create(name=name)
            for name in COALITIONS:
                Coalition.objects.get_or_create(name=name)

        self.stdout.write(self.style.SUCCESS(
            f"Seeded {County.objects.count()} counties, {City.objects.count()} cities, "
            f"{Domain.objects.count()} domains."
        ))

        if options['admin_email']:
            self._seed_super_admin(options['admin_email'], options['admin_password'])

    def _seed_super_admin(self, email, password):
        user, created = User.objects.get_or_create(
            username=email,
            defaults={'email': email, 'role': UserRole.SUPER_ADMIN, 'is_staff': True, 'is_superuser': True},
        )
        if created:
            user.set_password(password)
            user.save()
            self.stdout.write(self.style.SUCCESS(f"Created super administrator {email}"))
        else:
            self.stdout.write(f"Super administrator {email} already exists")
