import argparse

from wms.core.exceptions import StorageFailure
from wms.core.logging import setup_logging
from wms.database import session_scope
from wms.services.ledger_service import reconcile_balances


def parse_args():
    parser = argparse.ArgumentParser(
        description="Recompute inventory balances from the stock-movement ledger."
    )
    parser.add_argument("--dry-run", action="store_true", help="Report drift without fixing it.")
    return parser.parse_args()


def main():
    setup_logging()
    args = parse_args()

    with session_scope() as db:
        try:
            corrections = reconcile_balances(db, dry_run=args.dry_run)
        except StorageFailure as exc:
            raise SystemExit(f"Reconciliation failed: {exc}") from exc

    for correction in corrections:
        recorded = correction["recorded"]
        print(
            f"product {correction['product_id']} @ {correction['warehouse_id']}: "
            f"{'missing' if recorded is None else recorded} -> {correction['expected']}"
        )

    if not corrections:
        print("All balances match the ledger.")
    elif args.dry_run:
        print("Dry run complete, no changes committed.")
    else:
        print(f"Reconciliation complete, {len(corrections)} balance(s) corrected.")


if __name__ == "__main__":
    main()
