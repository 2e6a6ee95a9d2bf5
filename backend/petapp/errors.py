"""
Domain exceptions. Services raise these for expected business-rule failures;
main.py translates them into HTTP responses through a single handler.
"""
from typing import Any, Optional


class PetAppError(Exception):
    status_code = 400
    error_code = "petapp_error"

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.error_code, "detail": self.message, **self.details}


class MonsterNotFoundError(PetAppError):
    status_code = 404
    error_code = "monster_not_found"


class ItemNotFoundError(PetAppError):
    """An owned accessory/background row that does not belong to the monster."""
    status_code = 404
    error_code = "item_not_found"


class UnknownCatalogItemError(PetAppError):
    status_code = 404
    error_code = "unknown_catalog_item"


class AlreadyOwnedError(PetAppError):
    status_code = 409
    error_code = "already_owned"


class InsufficientKoinsError(PetAppError):
    status_code = 402
    error_code = "insufficient_koins"

    def __init__(self, balance: int, price: int):
        super().__init__(
            f"Balance {balance} is too low for a {price} Koin purchase",
            {"balance": balance, "price": price},
        )
        self.balance = balance
        self.price = price
