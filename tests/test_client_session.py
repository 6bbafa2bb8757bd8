from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest import mock

from api_harness import SEED_PASSWORDS, ApiTestCase
from ooh_portal.client.api import ApiClient, UnauthorizedError
from ooh_portal.client.cache import QueryCache
from ooh_portal.client.session import FileSessionStore, SessionContext, SessionState


class QueryCacheTests(unittest.TestCase):
    def test_fetches_once_per_key(self) -> None:
        cache = QueryCache()
        fetch = mock.Mock(return_value=['row'])

        self.assertEqual(cache.get_or_fetch(('inventory', 'u1'), fetch), ['row'])
        self.assertEqual(cache.get_or_fetch(('inventory', 'u1'), fetch), ['row'])
        self.assertEqual(fetch.call_count, 1)

    def test_invalidate_by_prefix(self) -> None:
        cache = QueryCache()
        cache.get_or_fetch(('inventory', 'u1'), list)
        cache.get_or_fetch(('inventory', 'u2'), list)
        cache.get_or_fetch(('suppliers',), list)

        self.assertEqual(cache.invalidate('inventory'), 2)
        self.assertEqual(len(cache), 1)
        self.assertIn(('suppliers',), cache)


class SessionContextTests(unittest.TestCase):
    def test_file_store_survives_restart(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / 'session.json'
            SessionContext(store=FileSessionStore(path)).begin('tok', {'id': 'u1', 'role': 'auditor'})

            loaded = []
            restarted = SessionContext(store=FileSessionStore(path), on_load=[loaded.append])
            state = restarted.load()

            self.assertEqual(state, SessionState(token='tok', user={'id': 'u1', 'role': 'auditor'}))
            self.assertEqual(loaded, [state])
            self.assertEqual(restarted.token, 'tok')

            restarted.clear()
            self.assertFalse(path.exists())
            self.assertIsNone(restarted.user)

    def test_corrupt_file_reads_as_logged_out(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / 'session.json'
            path.write_text('{not json', encoding='utf-8')
            self.assertIsNone(SessionContext(store=FileSessionStore(path)).load())

    def test_clear_notifies_listeners(self) -> None:
        cleared = mock.Mock()
        context = SessionContext(on_clear=[cleared])
        context.begin('tok', {'id': 'u1', 'role': 'finance_officer'})
        context.clear()
        cleared.assert_called_once_with()


class ApiClientTests(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.api = ApiClient(self.client)

    def test_login_keeps_token_out_of_user(self) -> None:
        user = self.api.login('planner', SEED_PASSWORDS['planner'])
        self.assertNotIn('token', user)
        self.assertNotIn('password', user)
        self.assertTrue(self.api.session.token)

    def test_switching_user_does_not_reuse_inventory(self) -> None:
        self.api.login('supplier', SEED_PASSWORDS['supplier'])
        self.assertEqual(len(self.api.list_inventory()), 4)
        self.api.logout()

        self.assertEqual(len(self.api.cache), 0)
        self.assertIsNone(self.api.session.user)

        self.api.login('admin', SEED_PASSWORDS['admin'])
        self.assertEqual(len(self.api.list_inventory()), 8)

    def test_cache_keys_include_filters(self) -> None:
        self.api.login('admin', SEED_PASSWORDS['admin'])
        gauteng = self.api.list_inventory(region='Gauteng')
        self.assertEqual(len(gauteng), 4)
        self.assertEqual(len(self.api.list_inventory()), 8)
        self.assertEqual(len(self.api.cache), 2)

    def test_write_invalidates_inventory(self) -> None:
        self.api.login('supplier', SEED_PASSWORDS['supplier'])
        self.assertEqual(len(self.api.list_inventory()), 4)

        self.api.create_inventory_item(
            {
                'screenName': 'Rosebank Link',
                'screenType': 'Digital screen',
                'location': 'Rosebank',
                'region': 'Gauteng',
                'dailyRate': '1500.00',
            }
        )
        self.assertEqual(len(self.api.list_inventory()), 5)

    def test_rejected_token_clears_session(self) -> None:
        self.api.session.begin('bogus', {'id': 'nobody', 'role': 'department_admin'})
        with self.assertRaises(UnauthorizedError):
            self.api.dashboard_stats()
        self.assertIsNone(self.api.session.token)

    def test_visible_sections_follow_role(self) -> None:
        self.api.login('finance', SEED_PASSWORDS['finance'])
        self.assertEqual(self.api.visible_sections(), ['dashboard', 'invoices'])

        self.api.logout()
        self.api.login('supplier', SEED_PASSWORDS['supplier'])
        self.assertEqual(self.api.visible_sections(), ['dashboard', 'bookings', 'inventory', 'documents'])

        self.api.logout()
        self.assertEqual(self.api.visible_sections(), [])


if __name__ == '__main__':
    unittest.main()
