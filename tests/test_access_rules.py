from __future__ import annotations

import unittest
from decimal import Decimal

from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from ooh_portal.auth import (
    GOVERNMENT_ROLES,
    ROLE_CAPABILITIES,
    SUPPLIER_ROLES,
    Capability,
    Principal,
    Role,
    has_capability,
    is_supplier_role,
)
from ooh_portal.db import create_tables
from ooh_portal.errors import NotFoundError
from ooh_portal.models import InventoryItem
from ooh_portal.services.dashboard_service import format_spend
from ooh_portal.services.inventory_service import (
    can_access_item,
    get_inventory_item,
    list_inventory,
    resolve_write_supplier_id,
)


def _principal(role: Role, supplier_id: str | None = None) -> Principal:
    return Principal(id='u-1', username='someone', full_name='Some One', role=role, supplier_id=supplier_id, active=True)


def _item(item_id: str, supplier_id: str) -> InventoryItem:
    return InventoryItem(
        id=item_id,
        supplier_id=supplier_id,
        screen_name=f'Screen {item_id}',
        screen_type='Static billboard',
        location='Somewhere',
        region='Gauteng',
        daily_rate=Decimal('100.00'),
    )


class InventoryAccessRuleTests(unittest.TestCase):
    def setUp(self) -> None:
        engine = create_engine('sqlite://')
        create_tables(bind=engine)
        self.addCleanup(engine.dispose)
        self.db = Session(engine)
        self.addCleanup(self.db.close)
        self.db.add_all([_item('i-1', 'jcd'), _item('i-2', 'jcd'), _item('i-3', 'prime')])
        self.db.commit()

    def _visible_ids(self, principal: Principal) -> list[str]:
        return sorted(item.id for item in list_inventory(self.db, principal=principal))

    def test_government_roles_see_every_item(self) -> None:
        for role in GOVERNMENT_ROLES:
            with self.subTest(role=role):
                self.assertEqual(self._visible_ids(_principal(role)), ['i-1', 'i-2', 'i-3'])

    def test_supplier_roles_only_see_their_own_items(self) -> None:
        for role in SUPPLIER_ROLES:
            with self.subTest(role=role):
                principal = _principal(role, 'jcd')
                self.assertEqual(self._visible_ids(principal), ['i-1', 'i-2'])
                with self.assertRaises(NotFoundError):
                    get_inventory_item(self.db, principal=principal, item_id='i-3')

    def test_supplier_filter_is_intersected_with_scope(self) -> None:
        principal = _principal(Role.SUPPLIER_USER, 'jcd')
        self.assertEqual(list_inventory(self.db, principal=principal, supplier_id='prime'), [])

    def test_supplier_role_without_affiliation_sees_nothing(self) -> None:
        principal = _principal(Role.SUPPLIER_USER, None)
        self.assertEqual(self._visible_ids(principal), [])
        self.assertFalse(can_access_item(principal, None))

    def test_supplier_writes_are_stamped_with_own_supplier(self) -> None:
        principal = _principal(Role.SUPPLIER_ADMIN, 'jcd')
        self.assertEqual(resolve_write_supplier_id(principal, 'prime'), 'jcd')
        self.assertEqual(resolve_write_supplier_id(principal, None), 'jcd')

    def test_department_writes_keep_requested_supplier(self) -> None:
        principal = _principal(Role.DEPARTMENT_ADMIN)
        self.assertEqual(resolve_write_supplier_id(principal, 'prime'), 'prime')


class CapabilityTests(unittest.TestCase):
    def test_every_role_has_a_capability_entry(self) -> None:
        self.assertEqual(set(ROLE_CAPABILITIES), set(Role))
        self.assertEqual(GOVERNMENT_ROLES | SUPPLIER_ROLES, frozenset(Role))
        self.assertFalse(GOVERNMENT_ROLES & SUPPLIER_ROLES)

    def test_administration_is_department_admin_only(self) -> None:
        allowed = {role for role in Role if has_capability(role, Capability.ADMINISTER)}
        self.assertEqual(allowed, {Role.DEPARTMENT_ADMIN})

    def test_invoices_visible_to_finance_and_auditors(self) -> None:
        allowed = {role for role in Role if has_capability(role, Capability.VIEW_INVOICES)}
        self.assertEqual(allowed, {Role.DEPARTMENT_ADMIN, Role.FINANCE_OFFICER, Role.AUDITOR})

    def test_accepts_raw_role_strings(self) -> None:
        self.assertTrue(is_supplier_role('supplier_user'))
        self.assertFalse(is_supplier_role('auditor'))
        self.assertTrue(has_capability('auditor', Capability.VIEW_AUDIT_LOG))


class SpendFormattingTests(unittest.TestCase):
    def test_null_sum_is_zero(self) -> None:
        self.assertEqual(format_spend(None), '0')

    def test_sum_keeps_two_decimal_places(self) -> None:
        self.assertEqual(format_spend(Decimal('525000.5')), '525000.50')
        self.assertEqual(format_spend(Decimal('85000.00')), '85000.00')


if __name__ == '__main__':
    unittest.main()
