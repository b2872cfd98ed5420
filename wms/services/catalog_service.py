import logging
import secrets
import string

from sqlalchemy import select
from sqlalchemy.orm import Session

from wms.config import get_settings
from wms.core.constants import WAREHOUSE_CODE_LENGTH
from wms.core.exceptions import ConstraintViolation
from wms.models.category import ProductCategory
from wms.models.product import Product
from wms.models.unit import UnitOfMeasure
from wms.models.warehouse import Warehouse
from wms.services.entity_store import EntityStore

logger = logging.getLogger(__name__)

_CODE_ALPHABET = string.ascii_uppercase + string.digits


def product_store(db: Session) -> EntityStore[Product]:
    return EntityStore(
        db,
        Product,
        order_by=(Product.name, Product.id),
        unique_key="sku",
        search_fields=("name", "sku"),
    )


def category_store(db: Session) -> EntityStore[ProductCategory]:
    return EntityStore(
        db,
        ProductCategory,
        order_by=(ProductCategory.name,),
        unique_key="name",
        search_fields=("name",),
    )


def unit_store(db: Session) -> EntityStore[UnitOfMeasure]:
    return EntityStore(
        db,
        UnitOfMeasure,
        order_by=(UnitOfMeasure.name,),
        unique_key="id",
        search_fields=("id", "name"),
    )


def warehouse_store(db: Session) -> EntityStore[Warehouse]:
    return EntityStore(
        db,
        Warehouse,
        order_by=(Warehouse.name,),
        unique_key="id",
        search_fields=("id", "name", "city"),
    )


def generate_warehouse_code(length: int = WAREHOUSE_CODE_LENGTH) -> str:
    return "".join(secrets.choice(_CODE_ALPHABET) for _ in range(length))


def warehouse_code_taken(db: Session, code: str) -> bool:
    # Soft-deleted warehouses still own their code.
    return db.execute(select(Warehouse.id).where(Warehouse.id == code).limit(1)).first() is not None


def create_warehouse(db: Session, fields: dict) -> Warehouse:
    fields = dict(fields)
    code = (fields.get("id") or "").strip()

    if code:
        if warehouse_code_taken(db, code):
            raise ConstraintViolation("Warehouse code already exists: {}".format(code))
    else:
        attempts = max(1, get_settings().WAREHOUSE_CODE_ATTEMPTS)
        for _ in range(attempts):
            candidate = generate_warehouse_code()
            if not warehouse_code_taken(db, candidate):
                code = candidate
                break
            logger.warning("Generated warehouse code %s collides, retrying", candidate)
        else:
            raise ConstraintViolation(
                "Unable to generate a unique warehouse code after {} attempts".format(attempts)
            )

    fields["id"] = code
    return warehouse_store(db).create(fields)


__all__ = [
    "category_store",
    "create_warehouse",
    "generate_warehouse_code",
    "product_store",
    "unit_store",
    "warehouse_code_taken",
    "warehouse_store",
]
