"""
Koin wallet ledger. The balance is a single running total per user; there is
no transaction history.
"""
import logging

from supabase import Client

from .db import get_wallet, increment_wallet
from .engine.catalog import PACKAGE_BY_PRODUCT, KoinPackage
from .errors import InsufficientKoinsError, UnknownCatalogItemError

logger = logging.getLogger(__name__)


def _check_amount(amount: int) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int) or amount < 0:
        raise ValueError(f"Koin amount must be a non-negative integer, got {amount!r}")


def get_balance(db: Client, user_id: str) -> int:
    wallet = get_wallet(db, user_id)
    return int(wallet.get("balance") or 0) if wallet else 0


def credit(db: Client, user_id: str, amount: int) -> int:
    _check_amount(amount)
    balance = increment_wallet(db, user_id, amount)
    logger.info("Wallet %s...: +%d Koins (balance %d)", user_id[:8], amount, balance)
    return balance


def debit(db: Client, user_id: str, amount: int) -> int:
    """Subtract without an overdraft check; use spend() for purchases."""
    _check_amount(amount)
    balance = increment_wallet(db, user_id, -amount)
    logger.info("Wallet %s...: -%d Koins (balance %d)", user_id[:8], amount, balance)
    return balance


def spend(db: Client, user_id: str, amount: int) -> int:
    """
    Debit for a purchase after checking the balance covers it.
    The check and the debit are separate round trips, so two concurrent
    purchases can both pass the check.
    """
    _check_amount(amount)
    balance = get_balance(db, user_id)
    if balance < amount:
        raise InsufficientKoinsError(balance, amount)
    return debit(db, user_id, amount)


def package_for_product(product_id: str) -> KoinPackage:
    package = PACKAGE_BY_PRODUCT.get(product_id)
    if package is None:
        raise UnknownCatalogItemError(f"Unknown Koin package product: {product_id}")
    return package


def credit_package(db: Client, user_id: str, product_id: str) -> tuple[KoinPackage, int]:
    """Top up the wallet with a purchased Koin package. Returns (package, new balance)."""
    package = package_for_product(product_id)
    return package, credit(db, user_id, package.koins)
