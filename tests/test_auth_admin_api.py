from __future__ import annotations

import unittest

from sqlalchemy import select

from api_harness import ApiTestCase
from ooh_portal.models import AuthEvent, InventoryItem, Supplier, User


class LoginTests(ApiTestCase):
    def test_login_returns_user_without_password(self) -> None:
        response = self.client.post('/api/auth/login', json={'username': 'admin', 'password': 'admin123'})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body['username'], 'admin')
        self.assertEqual(body['role'], 'department_admin')
        self.assertNotIn('password', body)
        self.assertNotIn('passwordHash', body)
        self.assertTrue(body['token'])
        self.assertEqual(response.headers['x-session-token'], body['token'])

    def test_bad_password_is_unauthorized_and_recorded(self) -> None:
        response = self.client.post('/api/auth/login', json={'username': 'admin', 'password': 'wrong'})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()['message'], 'Invalid credentials')
        with self.session_factory() as db:
            reasons = db.execute(select(AuthEvent.failure_reason).where(AuthEvent.success.is_(False))).scalars().all()
        self.assertEqual(reasons, ['BAD_PASSWORD'])

    def test_missing_fields_are_a_validation_error(self) -> None:
        response = self.client.post('/api/auth/login', json={'username': 'admin'})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['errors'][0]['field'], 'password')

    def test_passwords_are_stored_hashed(self) -> None:
        with self.session_factory() as db:
            stored = db.execute(select(User.password_hash).where(User.username == 'admin')).scalar_one()
        self.assertNotEqual(stored, 'admin123')
        self.assertTrue(stored.startswith('$argon2'))


class IdentityTests(ApiTestCase):
    def test_requests_without_a_session_are_rejected(self) -> None:
        self.assertEqual(self.client.get('/api/users').status_code, 401)
        self.assertEqual(self.client.get('/api/inventory', headers={'x-session-token': 'forged'}).status_code, 401)

    def test_a_bare_user_id_is_not_a_credential(self) -> None:
        with self.session_factory() as db:
            admin_id = db.execute(select(User.id).where(User.username == 'admin')).scalar_one()
        response = self.client.get('/api/inventory', headers={'user-id': admin_id, 'x-session-token': admin_id})
        self.assertEqual(response.status_code, 401)

    def test_me_and_logout(self) -> None:
        headers = self.login('auditor')
        me = self.client.get('/api/auth/me', headers=headers)
        self.assertEqual(me.json()['role'], 'auditor')

        self.assertEqual(self.client.post('/api/auth/logout', headers=headers).status_code, 204)
        self.assertEqual(self.client.get('/api/auth/me', headers=headers).status_code, 401)

    def test_deactivated_user_loses_access(self) -> None:
        admin = self.login('admin')
        planner = self.login('planner')
        planner_id = self.client.get('/api/auth/me', headers=planner).json()['id']

        self.client.patch(f'/api/users/{planner_id}', json={'active': False}, headers=admin)
        self.assertEqual(self.client.get('/api/campaigns', headers=planner).status_code, 401)
        login = self.client.post('/api/auth/login', json={'username': 'planner', 'password': 'planner123'})
        self.assertEqual(login.status_code, 401)

    def test_api_docs_need_no_session(self) -> None:
        for path in ('/docs', '/docs/oauth2-redirect', '/redoc', '/openapi.json'):
            with self.subTest(path=path):
                self.assertEqual(self.client.get(path).status_code, 200)

    def test_api_responses_are_not_cacheable(self) -> None:
        response = self.client.get('/api/inventory', headers=self.login('admin'))
        self.assertEqual(response.headers['cache-control'], 'no-store')


class UserAdminTests(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.headers = self.login('admin')

    def test_list_users_never_exposes_passwords(self) -> None:
        users = self.client.get('/api/users', headers=self.headers).json()
        self.assertEqual(len(users), 6)
        for user in users:
            self.assertNotIn('password', user)
            self.assertNotIn('passwordHash', user)

    def test_create_user_and_log_in(self) -> None:
        response = self.client.post(
            '/api/users',
            json={
                'username': 'newplanner',
                'password': 'secret-pass',
                'fullName': 'Lerato Molefe',
                'email': 'lerato@ooh.gov.za',
            },
            headers=self.headers,
        )
        self.assertEqual(response.status_code, 201, response.text)
        self.assertEqual(response.json()['role'], 'campaign_planner')
        self.login('newplanner', 'secret-pass')

    def test_duplicate_username_is_rejected(self) -> None:
        response = self.client.post(
            '/api/users',
            json={'username': 'admin', 'password': 'x', 'fullName': 'Dup', 'email': 'dup@ooh.gov.za'},
            headers=self.headers,
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['errors'][0]['field'], 'username')

    def test_unknown_role_is_rejected(self) -> None:
        response = self.client.post(
            '/api/users',
            json={'username': 'x', 'password': 'x', 'fullName': 'X', 'email': 'x@ooh.gov.za', 'role': 'superuser'},
            headers=self.headers,
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['errors'][0]['field'], 'role')

    def test_toggling_user_active_keeps_the_row(self) -> None:
        user = next(u for u in self.client.get('/api/users', headers=self.headers).json() if u['username'] == 'finance')
        response = self.client.patch(f"/api/users/{user['id']}", json={'active': False}, headers=self.headers)
        self.assertEqual(response.status_code, 200)
        self.assertFalse(response.json()['active'])

        fetched = self.client.get(f"/api/users/{user['id']}", headers=self.headers)
        self.assertEqual(fetched.status_code, 200)
        self.assertFalse(fetched.json()['active'])
        self.assertEqual(self.count_rows(User), 6)

        reactivated = self.client.patch(f"/api/users/{user['id']}", json={'active': True}, headers=self.headers)
        self.assertTrue(reactivated.json()['active'])

    def test_password_change_takes_effect(self) -> None:
        user = next(u for u in self.client.get('/api/users', headers=self.headers).json() if u['username'] == 'auditor')
        self.client.patch(f"/api/users/{user['id']}", json={'password': 'rotated-pass'}, headers=self.headers)
        failed = self.client.post('/api/auth/login', json={'username': 'auditor', 'password': 'auditor123'})
        self.assertEqual(failed.status_code, 401)
        self.login('auditor', 'rotated-pass')


class UserAdminAccessTests(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.headers = self.login('supplier')
        self.me = self.client.get('/api/auth/me', headers=self.headers).json()

    def test_supplier_cannot_change_own_affiliation_or_role(self) -> None:
        primedia_id = self.supplier_id('Primedia Outdoor')
        for change in ({'supplierId': primedia_id}, {'role': 'department_admin'}):
            with self.subTest(change=change):
                response = self.client.patch(f"/api/users/{self.me['id']}", json=change, headers=self.headers)
                self.assertEqual(response.status_code, 404)
                self.assertEqual(response.json()['message'], 'User not found')

        with self.session_factory() as db:
            user = db.get(User, self.me['id'])
            self.assertEqual(user.supplier_id, self.me['supplierId'])
            self.assertEqual(user.role.value, 'supplier_admin')

        items = self.client.get('/api/inventory', headers=self.headers).json()
        self.assertEqual(len(items), 4)
        self.assertTrue(all(item['supplierId'] == self.me['supplierId'] for item in items))

    def test_non_admins_cannot_create_users(self) -> None:
        for username in ('supplier', 'planner', 'auditor'):
            with self.subTest(username=username):
                response = self.client.post(
                    '/api/users',
                    json={'username': f'{username}-made', 'password': 'x', 'fullName': 'X', 'email': 'x@ooh.gov.za'},
                    headers=self.login(username),
                )
                self.assertEqual(response.status_code, 404)
        self.assertEqual(self.count_rows(User), 6)

    def test_non_admins_see_no_users(self) -> None:
        self.assertEqual(self.client.get('/api/users', headers=self.headers).json(), [])
        self.assertEqual(self.client.get(f"/api/users/{self.me['id']}", headers=self.headers).status_code, 404)
        self.assertEqual(self.client.get('/api/auth/me', headers=self.headers).status_code, 200)


class SupplierAdminTests(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.headers = self.login('admin')

    def test_create_supplier(self) -> None:
        response = self.client.post(
            '/api/suppliers',
            json={'name': 'Tractor Outdoor', 'contactPerson': 'Zanele Khumalo', 'email': 'hello@tractor.co.za'},
            headers=self.headers,
        )
        self.assertEqual(response.status_code, 201)
        self.assertTrue(response.json()['active'])
        self.assertIsNone(response.json()['phone'])

    def test_supplier_requires_contact_person(self) -> None:
        response = self.client.post(
            '/api/suppliers', json={'name': 'Tractor Outdoor', 'email': 'hello@tractor.co.za'}, headers=self.headers
        )
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['errors'][0]['field'], 'contactPerson')

    def test_toggling_supplier_active_keeps_the_row_and_its_inventory(self) -> None:
        supplier_id = self.supplier_id('Primedia Outdoor')
        response = self.client.patch(f'/api/suppliers/{supplier_id}', json={'active': False}, headers=self.headers)
        self.assertFalse(response.json()['active'])

        fetched = self.client.get(f'/api/suppliers/{supplier_id}', headers=self.headers)
        self.assertEqual(fetched.status_code, 200)
        self.assertFalse(fetched.json()['active'])
        self.assertEqual(self.count_rows(Supplier), 2)
        self.assertEqual(self.count_rows(InventoryItem), 8)

    def test_unknown_supplier(self) -> None:
        response = self.client.get('/api/suppliers/missing', headers=self.headers)
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()['message'], 'Supplier not found')


class AuditLogTests(ApiTestCase):
    def test_auditor_sees_recorded_changes(self) -> None:
        admin = self.login('admin')
        self.client.post('/api/campaigns', json={'name': 'Audited'}, headers=admin)

        entries = self.client.get('/api/audit-log', headers=self.login('auditor')).json()
        actions = [entry['action'] for entry in entries]
        self.assertIn('CAMPAIGN_CREATED', actions)
        self.assertIn('AUTH_LOGIN', actions)

    def test_roles_without_audit_access_get_an_empty_list(self) -> None:
        response = self.client.get('/api/audit-log', headers=self.login('supplier'))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), [])


class SeedEndpointTests(ApiTestCase):
    seed = False

    def test_seed_is_idempotent(self) -> None:
        first = self.client.post('/api/seed')
        self.assertEqual(first.json()['message'], 'Seed data inserted')
        second = self.client.post('/api/seed')
        self.assertEqual(second.json()['message'], 'Seed data already present')
        self.assertEqual(self.count_rows(InventoryItem), 8)
        self.assertEqual(self.count_rows(User), 6)


if __name__ == '__main__':
    unittest.main()
