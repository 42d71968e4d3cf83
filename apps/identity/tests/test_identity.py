from django.test import TestCase, Client

from apps.identity.jwt_auth import create_token_pair, decode_token
from apps.identity.models import User, UserRole, UserStatus
from apps.identity.permissions import Permissions, can_access_organization, get_user_permissions
from apps.identity.services import count_users, create_organization_admin, find_organization_admins

import uuid


class RBACTest(TestCase):
    def test_super_admin_permissions(self):
        user = User.objects.create_user(username="root", password="pw", role=UserRole.SUPER_ADMIN)
        perms = get_user_permissions(user)
        self.assertIn(Permissions.ORGANIZATION_ADMINISTER, perms)
        self.assertIn(Permissions.ORGANIZATION_REQUEST_MANAGE, perms)
        self.assertNotIn(Permissions.APPLICATION_REQUEST, perms)

    def test_admin_permissions(self):
        user = User.objects.create_user(username="admin", password="pw", role=UserRole.ADMIN)
        perms = get_user_permissions(user)
        self.assertIn(Permissions.ORGANIZATION_MANAGE, perms)
        self.assertIn(Permissions.APPLICATION_REQUEST, perms)
        self.assertNotIn(Permissions.ORGANIZATION_ADMINISTER, perms)

    def test_employee_permissions(self):
        user = User.objects.create_user(username="employee", password="pw", role=UserRole.EMPLOYEE)
        perms = get_user_permissions(user)
        self.assertIn(Permissions.ORGANIZATION_VIEW, perms)
        self.assertNotIn(Permissions.ORGANIZATION_MANAGE, perms)

    def test_restricted_user_has_no_permissions(self):
        user = User.objects.create_user(
            username="gone", password="pw", role=UserRole.ADMIN, status=UserStatus.RESTRICTED,
        )
        self.assertEqual(get_user_permissions(user), [])

    def test_organization_access(self):
        org_id = uuid.uuid4()
        admin = User.objects.create_user(username="admin", password="pw", role=UserRole.ADMIN, org_id=org_id)
        root = User.objects.create_user(username="root", password="pw", role=UserRole.SUPER_ADMIN)

        self.assertTrue(can_access_organization(admin, org_id))
        self.assertFalse(can_access_organization(admin, uuid.uuid4()))
        self.assertTrue(can_access_organization(root, uuid.uuid4()))


class UserServiceTest(TestCase):
    def test_create_organization_admin(self):
        org_id = uuid.uuid4()
        user = create_organization_admin(org_id, "Ana Pop", "ana@ngo.ro", "+40722123456")

        self.assertEqual(user.role, UserRole.ADMIN)
        self.assertEqual(user.org_id, org_id)
        self.assertEqual(user.username, "ana@ngo.ro")
        self.assertEqual(find_organization_admins(org_id), [user])

    def test_count_users_skips_super_admins(self):
        org_id = uuid.uuid4()
        User.objects.create_user(username="a", role=UserRole.ADMIN, org_id=org_id)
        User.objects.create_user(username="e", role=UserRole.EMPLOYEE, org_id=org_id,
                                 status=UserStatus.RESTRICTED)
        User.objects.create_user(username="root", role=UserRole.SUPER_ADMIN)

        self.assertEqual(count_users(), 2)
        self.assertEqual(count_users([org_id], role=UserRole.EMPLOYEE), 1)


class AuthApiTest(TestCase):
    def setUp(self):
        self.client = Client()
        self.user = User.objects.create_user(
            username="admin@ngo.ro", password="secret", role=UserRole.ADMIN, org_id=uuid.uuid4(),
        )

    def test_login_sets_cookies(self):
        response = self.client.post(
            "/api/identity/login",
            {"username": "admin@ngo.ro", "password": "secret"},
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertIn("access_token", response.cookies)
        self.assertEqual(response.json()["user"]["role"], UserRole.ADMIN)

        me = self.client.get("/api/identity/me")
        self.assertEqual(me.status_code, 200)
        self.assertEqual(me.json()["username"], "admin@ngo.ro")

    def test_login_rejects_bad_password(self):
        response = self.client.post(
            "/api/identity/login",
            {"username": "admin@ngo.ro", "password": "wrong"},
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 401)

    def test_me_requires_authentication(self):
        self.assertEqual(self.client.get("/api/identity/me").status_code, 401)

    def test_access_token_round_trip(self):
        access, refresh = create_token_pair(self.user)
        self.assertEqual(decode_token(access)["sub"], str(self.user.id))
        self.assertIsNone(decode_token(refresh))
        self.assertEqual(decode_token(refresh, expected_type='refresh')["sub"], str(self.user.id))
