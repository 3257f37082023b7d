"""
Integration tests for registration, login and profile endpoints.
"""
import json
from django.test import TestCase, Client
from django.contrib.auth import get_user_model

from apps.identity.models import UserRole
from apps.identity.jwt_auth import create_access_token, decode_token


User = get_user_model()


def auth_header(user) -> dict:
    return {'HTTP_AUTHORIZATION': f'Bearer {create_access_token(user)}'}


class RegistrationAPITest(TestCase):
    """Admin and member registration."""

    def setUp(self):
        self.client = Client()

    def _register(self, payload):
        return self.client.post(
            '/api/auth/register',
            data=json.dumps(payload),
            content_type='application/json',
        )

    def test_register_without_token_creates_admin(self):
        response = self._register({
            'name': 'Alice',
            'email': 'alice@example.com',
            'password': 'secret123',
        })
        self.assertEqual(response.status_code, 201)

        data = response.json()
        self.assertEqual(data['role'], UserRole.ADMIN)
        self.assertIsNone(data['admin_id'])
        self.assertEqual(len(data['admin_invite_token']), 24)
        self.assertTrue(data['token'])

        claims = decode_token(data['token'])
        self.assertEqual(claims['id'], data['id'])
        self.assertEqual(claims['role'], UserRole.ADMIN)
        self.assertEqual(claims['name'], 'Alice')

    def test_register_with_invite_token_creates_member(self):
        admin = User.objects.create_user(
            username='alice@example.com',
            email='alice@example.com',
            password='secret123',
            name='Alice',
            role=UserRole.ADMIN,
        )

        response = self._register({
            'name': 'Bob',
            'email': 'bob@example.com',
            'password': 'secret123',
            'admin_invite_token': admin.admin_invite_token,
        })
        self.assertEqual(response.status_code, 201)

        data = response.json()
        self.assertEqual(data['role'], UserRole.MEMBER)
        self.assertEqual(data['admin_id'], str(admin.id))
        self.assertIsNone(data['admin_invite_token'])

        member = User.objects.get(email='bob@example.com')
        self.assertEqual(member.admin_id, admin.id)

    def test_register_with_unknown_invite_token(self):
        response = self._register({
            'name': 'Bob',
            'email': 'bob@example.com',
            'password': 'secret123',
            'admin_invite_token': 'not-a-real-token',
        })
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], 'Invalid invite token')
        self.assertFalse(User.objects.filter(email='bob@example.com').exists())

    def test_register_duplicate_email(self):
        payload = {'name': 'Alice', 'email': 'alice@example.com', 'password': 'secret123'}
        self.assertEqual(self._register(payload).status_code, 201)

        payload['email'] = 'ALICE@example.com'
        response = self._register(payload)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['message'], 'User already exists')
        self.assertEqual(User.objects.count(), 1)

    def test_register_with_missing_fields(self):
        response = self._register({'name': '', 'email': 'a@example.com', 'password': 'x'})
        self.assertEqual(response.status_code, 400)

    def test_invite_tokens_are_unique_per_admin(self):
        first = User.objects.create_user(
            username='a@example.com', email='a@example.com', password='pw', name='A',
            role=UserRole.ADMIN,
        )
        second = User.objects.create_user(
            username='b@example.com', email='b@example.com', password='pw', name='B',
            role=UserRole.ADMIN,
        )
        self.assertNotEqual(first.admin_invite_token, second.admin_invite_token)


class LoginAPITest(TestCase):
    """Email/password login."""

    def setUp(self):
        self.client = Client()
        self.user = User.objects.create_user(
            username='alice@example.com',
            email='alice@example.com',
            password='secret123',
            name='Alice',
            role=UserRole.ADMIN,
        )

    def _login(self, email, password):
        return self.client.post(
            '/api/auth/login',
            data=json.dumps({'email': email, 'password': password}),
            content_type='application/json',
        )

    def test_login_success(self):
        response = self._login('alice@example.com', 'secret123')
        self.assertEqual(response.status_code, 200)

        data = response.json()
        self.assertEqual(data['id'], str(self.user.id))
        self.assertEqual(data['admin_invite_token'], self.user.admin_invite_token)
        self.assertEqual(decode_token(data['token'])['id'], str(self.user.id))

    def test_wrong_password_and_unknown_email_fail_identically(self):
        wrong_password = self._login('alice@example.com', 'nope')
        unknown_email = self._login('nobody@example.com', 'secret123')

        self.assertEqual(wrong_password.status_code, 401)
        self.assertEqual(unknown_email.status_code, 401)
        self.assertEqual(wrong_password.json(), unknown_email.json())
        self.assertEqual(wrong_password.json()['message'], 'Invalid email or password')


class ProfileAPITest(TestCase):
    """Profile read and update."""

    def setUp(self):
        self.client = Client()
        self.user = User.objects.create_user(
            username='alice@example.com',
            email='alice@example.com',
            password='secret123',
            name='Alice',
            role=UserRole.ADMIN,
        )
        self.other = User.objects.create_user(
            username='carol@example.com',
            email='carol@example.com',
            password='secret123',
            name='Carol',
            role=UserRole.ADMIN,
        )

    def _put_profile(self, payload):
        return self.client.put(
            '/api/auth/profile',
            data=json.dumps(payload),
            content_type='application/json',
            **auth_header(self.user),
        )

    def test_profile_requires_token(self):
        response = self.client.get('/api/auth/profile')
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()['message'], 'Not authorized, no token')

    def test_profile_rejects_invalid_token(self):
        response = self.client.get('/api/auth/profile', HTTP_AUTHORIZATION='Bearer garbage')
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()['message'], 'Not authorized, token failed')

    def test_get_profile(self):
        response = self.client.get('/api/auth/profile', **auth_header(self.user))
        self.assertEqual(response.status_code, 200)

        data = response.json()
        self.assertEqual(data['email'], 'alice@example.com')
        self.assertNotIn('password', data)

    def test_update_name_keeps_other_fields(self):
        response = self._put_profile({'name': 'Alice Smith'})
        self.assertEqual(response.status_code, 200)

        self.user.refresh_from_db()
        self.assertEqual(self.user.name, 'Alice Smith')
        self.assertEqual(self.user.email, 'alice@example.com')
        self.assertTrue(response.json()['token'])

    def test_update_email_to_taken_address(self):
        response = self._put_profile({'email': 'carol@example.com'})
        self.assertEqual(response.status_code, 400)

        self.user.refresh_from_db()
        self.assertEqual(self.user.email, 'alice@example.com')

    def test_password_change_requires_old_password(self):
        response = self._put_profile({'password': 'newpass456'})
        self.assertEqual(response.status_code, 400)

        response = self._put_profile({'password': 'newpass456', 'old_password': 'wrong'})
        self.assertEqual(response.status_code, 401)

        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password('secret123'))

    def test_password_change_with_old_password(self):
        response = self._put_profile({'password': 'newpass456', 'old_password': 'secret123'})
        self.assertEqual(response.status_code, 200)

        self.user.refresh_from_db()
        self.assertTrue(self.user.check_password('newpass456'))


class UserModelTest(TestCase):
    """Tenant linkage rules enforced by the model."""

    def test_member_admin_cannot_change(self):
        admin = User.objects.create_user(
            username='a@example.com', email='a@example.com', password='pw', name='A',
            role=UserRole.ADMIN,
        )
        other_admin = User.objects.create_user(
            username='b@example.com', email='b@example.com', password='pw', name='B',
            role=UserRole.ADMIN,
        )
        member = User.objects.create_user(
            username='m@example.com', email='m@example.com', password='pw', name='M',
            role=UserRole.MEMBER, admin=admin,
        )

        member = User.objects.get(id=member.id)
        member.admin = other_admin
        with self.assertRaises(ValueError):
            member.save()

    def test_members_have_no_invite_token(self):
        admin = User.objects.create_user(
            username='a@example.com', email='a@example.com', password='pw', name='A',
            role=UserRole.ADMIN,
        )
        member = User.objects.create_user(
            username='m@example.com', email='m@example.com', password='pw', name='M',
            role=UserRole.MEMBER, admin=admin,
        )
        self.assertIsNone(member.admin_invite_token)
