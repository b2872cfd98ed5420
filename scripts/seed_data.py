import argparse
from datetime import timedelta
from decimal import Decimal

from sqlalchemy import delete, select

from wms.core.dates import utcnow
from wms.core.logging import setup_logging
from wms.database import Base, engine, session_scope
from wms.models import (
    InventoryBalance,
    Order,
    OrderItem,
    Product,
    ProductCategory,
    StockMovement,
    UnitOfMeasure,
    User,
    Warehouse,
    import_all_models,
)
from wms.services.ledger_service import record_movement
from wms.services.order_service import create_order
from wms.services.user_service import register_user


def parse_args():
    parser = argparse.ArgumentParser(description="Seed a demo warehouse catalog.")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Clear existing data before seeding.",
    )
    parser.add_argument("--admin-password", default="admin123", help="Password for the admin user.")
    return parser.parse_args()


def main():
    setup_logging()
    args = parse_args()

    import_all_models()
    Base.metadata.create_all(bind=engine)

    with session_scope() as db:
        if args.reset:
            for model in (
                OrderItem,
                Order,
                StockMovement,
                InventoryBalance,
                Product,
                ProductCategory,
                UnitOfMeasure,
                Warehouse,
                User,
            ):
                db.execute(delete(model))
            db.commit()

        has_product = db.execute(select(Product.id).limit(1)).first()
        if has_product:
            print("Seed skipped: products already exist.")
            return

        admin = register_user(
            db, "admin", args.admin_password, first_name="Admin", role="admin"
        )

        db.add_all(
            [
                UnitOfMeasure(id="EA", name="Each"),
                UnitOfMeasure(id="BOX", name="Box"),
                UnitOfMeasure(id="KG", name="Kilogram"),
            ]
        )
        electronics = ProductCategory(name="Electronics")
        hardware = ProductCategory(name="Hardware")
        db.add_all([electronics, hardware])
        db.add_all(
            [
                Warehouse(id="MAIN000001", name="Main Warehouse", city="Chicago", country="US"),
                Warehouse(id="EAST000001", name="East Depot", city="Newark", country="US"),
            ]
        )
        db.flush()

        products = [
            Product(
                sku="EL-1001",
                name="Barcode Scanner",
                category_id=electronics.id,
                uom_id="EA",
                price=Decimal("129.00"),
                cost=Decimal("74.50"),
                reorder_point=Decimal("10"),
                min_stock_level=Decimal("5"),
                max_stock_level=Decimal("80"),
                lead_time=14,
                created_by=admin.id,
            ),
            Product(
                sku="HW-2001",
                name="Pallet Jack",
                category_id=hardware.id,
                uom_id="EA",
                price=Decimal("459.00"),
                cost=Decimal("310.00"),
                reorder_point=Decimal("2"),
                lead_time=30,
                created_by=admin.id,
            ),
            Product(
                sku="HW-2002",
                name="Shelf Bolts",
                category_id=hardware.id,
                uom_id="BOX",
                price=Decimal("12.00"),
                cost=Decimal("4.20"),
                reorder_point=Decimal("50"),
                lead_time=7,
                created_by=admin.id,
            ),
        ]
        db.add_all(products)
        db.commit()

        movements = [
            (products[0].id, "MAIN000001", "IN", 40),
            (products[0].id, "MAIN000001", "OUT", 33),
            (products[1].id, "MAIN000001", "IN", 6),
            (products[2].id, "EAST000001", "IN", 120),
            (products[2].id, "EAST000001", "OUT", 85),
        ]
        for product_id, warehouse_id, direction, quantity in movements:
            record_movement(
                db,
                product_id,
                warehouse_id,
                direction,
                quantity,
                reference="seed",
                created_by=admin.id,
            )

        today = utcnow().date()
        create_order(
            db,
            {
                "order_type": "PURCHASE",
                "status": "DELIVERED",
                "order_date": today - timedelta(days=40),
                "warehouse_id": "MAIN000001",
                "customer_name": "Scanner Supply Co.",
                "created_by": admin.id,
            },
            [{"product_id": products[0].id, "quantity": 40, "unit_price": Decimal("74.50")}],
        )
        create_order(
            db,
            {
                "order_type": "SALES",
                "status": "PENDING",
                "order_date": today,
                "warehouse_id": "EAST000001",
                "customer_name": "Northside Builders",
                "created_by": admin.id,
            },
            [{"product_id": products[2].id, "quantity": 10, "unit_price": Decimal("12.00")}],
        )
        print("Seed data created.")


if __name__ == "__main__":
    main()
