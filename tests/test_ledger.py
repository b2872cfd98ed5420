import os
import tempfile
import threading
import unittest
from decimal import Decimal
from types import SimpleNamespace
from unittest import mock

from sqlalchemy.orm import sessionmaker

from wms.core.exceptions import ConstraintViolation, ValidationFailure
from wms.database.base import Base
from wms.database.engine import create_db_engine
from wms.models import import_all_models
from wms.models.stock_movement import StockMovement
from wms.services import ledger_service
from wms.services.catalog_service import create_warehouse, product_store
from wms.services.inventory_service import (
    delete_balance,
    get_balance_for,
    list_by_warehouse,
    update_balance,
)
from wms.services.ledger_service import (
    list_movements_by_product,
    list_movements_by_warehouse,
    recent_movements,
    reconcile_balances,
    record_movement,
    replay_quantity,
)

from tests.db_case import DatabaseTestCase


class LedgerTestCase(DatabaseTestCase):
    def setUp(self):
        super().setUp()
        products = product_store(self.db)
        self.p1 = products.create({"sku": "P1", "name": "Product 1", "reorder_point": Decimal("10")})
        self.p2 = products.create({"sku": "P2", "name": "Product 2"})
        create_warehouse(self.db, {"id": "W1", "name": "Main"})
        create_warehouse(self.db, {"id": "W2", "name": "Overflow"})

    def quantity(self, product_id, warehouse_id="W1"):
        balance = get_balance_for(self.db, product_id, warehouse_id)
        return None if balance is None else balance.quantity


class RecordMovementTest(LedgerTestCase):
    def test_in_movements_sum_into_a_fresh_balance(self):
        for qty in (3, "4.5", Decimal("2.25")):
            record_movement(self.db, self.p1.id, "W1", "IN", qty)
        self.assertEqual(self.quantity(self.p1.id), Decimal("9.75"))

    def test_first_in_creates_balance_with_zero_reserved(self):
        record_movement(self.db, self.p1.id, "W1", "IN", 10)
        balance = get_balance_for(self.db, self.p1.id, "W1")
        self.assertEqual(balance.quantity, Decimal("10"))
        self.assertEqual(balance.reserved_quantity, Decimal("0"))

    def test_in_and_out_scenario_goes_negative(self):
        record_movement(self.db, self.p1.id, "W1", "IN", 10)
        self.assertEqual(self.quantity(self.p1.id), Decimal("10"))
        record_movement(self.db, self.p1.id, "W1", "OUT", 3)
        self.assertEqual(self.quantity(self.p1.id), Decimal("7"))
        record_movement(self.db, self.p1.id, "W1", "OUT", 20)
        self.assertEqual(self.quantity(self.p1.id), Decimal("-13"))

    def test_mixed_sequence_equals_ins_minus_outs(self):
        sequence = [("IN", 5), ("OUT", 2), ("IN", 8), ("OUT", 1), ("OUT", 4), ("IN", 1)]
        for direction, qty in sequence:
            record_movement(self.db, self.p1.id, "W1", direction, qty)
        expected = sum(q for d, q in sequence if d == "IN") - sum(q for d, q in sequence if d == "OUT")
        self.assertEqual(self.quantity(self.p1.id), Decimal(expected))

    def test_balances_are_kept_per_pair(self):
        record_movement(self.db, self.p1.id, "W1", "IN", 10)
        record_movement(self.db, self.p1.id, "W2", "IN", 4)
        record_movement(self.db, self.p2.id, "W1", "IN", 1)
        self.assertEqual(self.quantity(self.p1.id, "W1"), Decimal("10"))
        self.assertEqual(self.quantity(self.p1.id, "W2"), Decimal("4"))
        self.assertEqual(self.quantity(self.p2.id, "W1"), Decimal("1"))
        self.assertEqual(len(list_by_warehouse(self.db, "W1")), 2)

    def test_returns_the_ledger_entry(self):
        movement = record_movement(
            self.db, self.p1.id, "W1", "in", 10, reference="PO-1", notes="first delivery"
        )
        self.assertIsInstance(movement, StockMovement)
        self.assertIsNotNone(movement.id)
        self.assertEqual(movement.direction, "IN")
        self.assertEqual(movement.quantity, Decimal("10"))
        self.assertEqual(movement.reference, "PO-1")
        self.assertIsNotNone(movement.created_at)

    def test_out_without_balance_records_ledger_entry_only(self):
        movement = record_movement(self.db, self.p1.id, "W1", "OUT", 5, out_policy="ignore")
        self.assertIsNotNone(movement.id)
        self.assertIsNone(get_balance_for(self.db, self.p1.id, "W1"))
        self.assertEqual(len(list_movements_by_product(self.db, self.p1.id)), 1)

    def test_out_without_balance_rejected_writes_nothing(self):
        with self.assertRaises(ValidationFailure):
            record_movement(self.db, self.p1.id, "W1", "OUT", 5, out_policy="reject")
        self.assertEqual(list_movements_by_product(self.db, self.p1.id), [])
        self.assertIsNone(get_balance_for(self.db, self.p1.id, "W1"))

    def test_out_without_balance_materialized_goes_negative(self):
        record_movement(self.db, self.p1.id, "W1", "OUT", 5, out_policy="materialize")
        self.assertEqual(self.quantity(self.p1.id), Decimal("-5"))
        record_movement(self.db, self.p1.id, "W1", "IN", 8, out_policy="materialize")
        self.assertEqual(self.quantity(self.p1.id), Decimal("3"))

    def test_non_positive_quantity_is_rejected_before_writing(self):
        for bad in (0, -1, "abc", "NaN", None):
            with self.assertRaises(ValidationFailure):
                record_movement(self.db, self.p1.id, "W1", "IN", bad)
        self.assertEqual(list_movements_by_product(self.db, self.p1.id), [])

    def test_unknown_direction_is_rejected(self):
        with self.assertRaises(ValidationFailure):
            record_movement(self.db, self.p1.id, "W1", "SIDEWAYS", 1)

    def test_unknown_product_fails_on_foreign_key(self):
        with self.assertRaises(ConstraintViolation):
            record_movement(self.db, 9999, "W1", "IN", 1)
        self.assertEqual(recent_movements(self.db), [])

    def test_unknown_policy_is_a_configuration_error(self):
        with self.assertRaises(ValueError):
            record_movement(self.db, self.p1.id, "W1", "IN", 1, out_policy="floor")


class LedgerQueryTest(LedgerTestCase):
    def test_listings_are_newest_first(self):
        first = record_movement(self.db, self.p1.id, "W1", "IN", 1)
        second = record_movement(self.db, self.p1.id, "W2", "IN", 2)
        third = record_movement(self.db, self.p2.id, "W1", "IN", 3)

        self.assertEqual(
            [m.id for m in list_movements_by_product(self.db, self.p1.id)],
            [second.id, first.id],
        )
        self.assertEqual(
            [m.id for m in list_movements_by_warehouse(self.db, "W1")],
            [third.id, first.id],
        )

    def test_recent_movements_honours_limit(self):
        ids = [record_movement(self.db, self.p1.id, "W1", "IN", 1).id for _ in range(12)]
        self.assertEqual([m.id for m in recent_movements(self.db)], list(reversed(ids))[:10])
        self.assertEqual([m.id for m in recent_movements(self.db, 3)], list(reversed(ids))[:3])


class ConcurrentOpenTest(LedgerTestCase):
    def test_lost_insert_race_falls_back_to_delta_update(self):
        record_movement(self.db, self.p1.id, "W1", "IN", 5)
        real_apply_delta = ledger_service._apply_delta
        calls = []

        def apply_delta(db, product_id, warehouse_id, delta):
            calls.append(delta)
            if len(calls) == 1:
                # Another writer opened the row after this update missed it.
                return False
            return real_apply_delta(db, product_id, warehouse_id, delta)

        with mock.patch.object(ledger_service, "_apply_delta", side_effect=apply_delta):
            record_movement(self.db, self.p1.id, "W1", "IN", 3)

        self.assertEqual(len(calls), 2)
        self.db.expire_all()
        self.assertEqual(self.quantity(self.p1.id), Decimal("8"))
        self.assertEqual(len(list_by_warehouse(self.db, "W1")), 1)
        self.assertEqual(len(list_movements_by_product(self.db, self.p1.id)), 2)


class ParallelWritersTest(unittest.TestCase):
    THREADS = 8
    MOVEMENTS_PER_THREAD = 20

    def setUp(self):
        import_all_models()
        tmp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(tmp_dir.cleanup)
        self.engine = create_db_engine(
            "sqlite:///{}".format(os.path.join(tmp_dir.name, "ledger.db"))
        )
        self.addCleanup(self.engine.dispose)
        Base.metadata.create_all(bind=self.engine)
        self.Session = sessionmaker(
            bind=self.engine,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
        )

        db = self.Session()
        try:
            self.product_id = product_store(db).create({"sku": "P1", "name": "Product 1"}).id
            create_warehouse(db, {"id": "W1", "name": "Main"})
        finally:
            db.close()

    def test_concurrent_in_movements_lose_no_update(self):
        errors = []

        def writer():
            db = self.Session()
            try:
                for _ in range(self.MOVEMENTS_PER_THREAD):
                    record_movement(db, self.product_id, "W1", "IN", 1)
            except Exception as exc:
                errors.append(exc)
            finally:
                db.close()

        threads = [threading.Thread(target=writer) for _ in range(self.THREADS)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(errors, [])
        db = self.Session()
        try:
            balances = list_by_warehouse(db, "W1")
            self.assertEqual(len(balances), 1)
            self.assertEqual(
                balances[0].quantity,
                Decimal(self.THREADS * self.MOVEMENTS_PER_THREAD),
            )
            self.assertEqual(
                len(list_movements_by_product(db, self.product_id)),
                self.THREADS * self.MOVEMENTS_PER_THREAD,
            )
        finally:
            db.close()


class ReplayTest(unittest.TestCase):
    @staticmethod
    def movements(*pairs):
        return [SimpleNamespace(direction=d, quantity=Decimal(q)) for d, q in pairs]

    def test_replay_sums_signed_quantities(self):
        seq = self.movements(("IN", "10"), ("OUT", "3"), ("OUT", "20"))
        self.assertEqual(replay_quantity(seq, "ignore"), Decimal("-13"))

    def test_leading_outs_depend_on_policy(self):
        seq = self.movements(("OUT", "4"), ("IN", "10"), ("OUT", "1"))
        self.assertEqual(replay_quantity(seq, "ignore"), Decimal("9"))
        self.assertEqual(replay_quantity(seq, "materialize"), Decimal("5"))

    def test_only_outs_yield_no_balance(self):
        self.assertIsNone(replay_quantity(self.movements(("OUT", "4")), "ignore"))
        self.assertIsNone(replay_quantity([], "ignore"))


class ReconcileTest(LedgerTestCase):
    def test_consistent_ledger_needs_no_corrections(self):
        record_movement(self.db, self.p1.id, "W1", "IN", 10)
        record_movement(self.db, self.p1.id, "W1", "OUT", 3)
        self.assertEqual(reconcile_balances(self.db, out_policy="ignore"), [])

    def test_drifted_balance_is_restored(self):
        record_movement(self.db, self.p1.id, "W1", "IN", 10)
        record_movement(self.db, self.p1.id, "W1", "OUT", 3)
        balance = get_balance_for(self.db, self.p1.id, "W1")
        update_balance(self.db, balance.id, {"quantity": Decimal("99")})

        report = reconcile_balances(self.db, dry_run=True, out_policy="ignore")
        self.assertEqual(len(report), 1)
        self.assertEqual(report[0]["recorded"], Decimal("99"))
        self.assertEqual(report[0]["expected"], Decimal("7"))
        self.assertEqual(self.quantity(self.p1.id), Decimal("99"))

        corrections = reconcile_balances(self.db, out_policy="ignore")
        self.assertEqual(len(corrections), 1)
        self.db.expire_all()
        self.assertEqual(self.quantity(self.p1.id), Decimal("7"))

    def test_missing_balance_is_recreated(self):
        record_movement(self.db, self.p2.id, "W2", "IN", 6)
        balance = get_balance_for(self.db, self.p2.id, "W2")
        delete_balance(self.db, balance.id)
        corrections = reconcile_balances(self.db, out_policy="ignore")
        self.assertEqual(corrections[0]["recorded"], None)
        self.assertEqual(self.quantity(self.p2.id, "W2"), Decimal("6"))


if __name__ == "__main__":
    unittest.main()
