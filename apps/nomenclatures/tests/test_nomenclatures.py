from io import StringIO

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.test import Client, TestCase

from apps.identity.models import UserRole
from apps.nomenclatures import services
from apps.nomenclatures.models import City, County, Federation

User = get_user_model()


class NomenclatureServiceTest(TestCase):

    def setUp(self):
        self.cluj = County.objects.create(name="Cluj", abbreviation="CJ")
        self.iasi = County.objects.create(name="Iasi", abbreviation="IS")
        City.objects.create(name="Cluj-Napoca", county=self.cluj)
        City.objects.create(name="Turda", county=self.cluj)
        City.objects.create(name="Iasi", county=self.iasi)

    def test_city_search(self):
        self.assertEqual([city.name for city in services.get_cities(search="tur")], ["Turda"])
        self.assertEqual(len(services.get_cities(county_id=self.cluj.id)), 2)

    def test_city_ids_bypass_filters(self):
        city = City.objects.get(name="Iasi")
        self.assertEqual(services.get_cities(ids=[city.id], county_id=self.cluj.id), [city])

    def test_add_federations_upserts_by_name(self):
        existing = Federation.objects.create(name="FONSS")

        federations = services.add_federations(["FONSS", " Federatia Noua ", "federatia noua", ""])

        self.assertEqual(federations[0], existing)
        self.assertEqual([federation.name for federation in federations], ["FONSS", "Federatia Noua"])
        self.assertEqual(Federation.objects.count(), 2)

    def test_add_federations_matches_existing_case_insensitively(self):
        existing = Federation.objects.create(name="FONSS")

        self.assertEqual(services.add_federations(["fonss"]), [existing])
        self.assertEqual(Federation.objects.get().name, "FONSS")


class NomenclatureApiTest(TestCase):

    def test_cities_are_public(self):
        county = County.objects.create(name="Cluj")
        City.objects.create(name="Cluj-Napoca", county=county)

        response = Client().get(f"/api/nomenclatures/cities?county_id={county.id}")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()[0]['county']['name'], "Cluj")


class SeedCommandTest(TestCase):

    def test_seed_is_idempotent(self):
        call_command('seed_nomenclatures', admin_email="root@onghub.ro", stdout=StringIO())
        counties = County.objects.count()
        call_command('seed_nomenclatures', admin_email="root@onghub.ro", stdout=StringIO())

        self.assertEqual(County.objects.count(), counties)
        self.assertTrue(City.objects.filter(name="Cluj-Napoca", county__abbreviation="CJ").exists())
        admin = User.objects.get(username="root@onghub.ro")
        self.assertEqual(admin.role, UserRole.SUPER_ADMIN)
        self.assertTrue(admin.check_password("admin"))
