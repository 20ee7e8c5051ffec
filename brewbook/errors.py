"""Error taxonomy shared by the stores, the facade and the HTTP adapter.

Four families: ``NotFound``, ``Conflict``, ``ValidationFailure`` and
``StorageFailure``. Nothing here knows about HTTP; status mapping lives in
``brewbook.api.errors``.
"""

from __future__ import annotations


class BrewbookError(Exception):
    """Base class for every error the core raises on purpose."""


class NotFound(BrewbookError):
    def __init__(self, entity: str, key: str) -> None:
        super().__init__(f"{entity} {key!r} not found")
        self.entity = entity
        self.key = key


class EntryNotFound(NotFound):
    def __init__(self, entry_id: str) -> None:
        super().__init__("entry", entry_id)


class Conflict(BrewbookError):
    pass


class DuplicateName(Conflict):
    def __init__(self, name: str) -> None:
        super().__init__(f"recipe named {name!r} already exists")
        self.name = name


class DuplicateIngredientKind(Conflict):
    def __init__(self, kind: str) -> None:
        super().__init__(f"recipe already has an entry of kind {kind!r}")
        self.kind = kind


class DuplicateKind(Conflict):
    def __init__(self, kind: str) -> None:
        super().__init__(f"ingredient kind {kind!r} is already registered")
        self.kind = kind


class InsufficientInventory(Conflict):
    def __init__(self, shortages: dict[str, int]) -> None:
        missing = ", ".join(f"{k} (short {v})" for k, v in sorted(shortages.items()))
        super().__init__(f"not enough inventory: {missing}")
        self.shortages = shortages


class ValidationFailure(BrewbookError):
    pass


class InvalidAmount(ValidationFailure):
    def __init__(self, amount: object) -> None:
        super().__init__(f"amount must be a non-negative integer, got {amount!r}")
        self.amount = amount


class InvalidPrice(ValidationFailure):
    def __init__(self, price: object) -> None:
        super().__init__(f"price must be a non-negative integer, got {price!r}")
        self.price = price


class InvalidName(ValidationFailure):
    def __init__(self, name: object) -> None:
        super().__init__(f"name must not be blank, got {name!r}")
        self.name = name


class UnknownKind(ValidationFailure):
    def __init__(self, kind: str) -> None:
        super().__init__(f"unknown ingredient kind {kind!r}")
        self.kind = kind


class InsufficientFunds(ValidationFailure):
    def __init__(self, paid: int, price: int) -> None:
        super().__init__(f"paid {paid} but the beverage costs {price}")
        self.paid = paid
        self.price = price


class StorageFailure(BrewbookError):
    """The backing store failed for reasons unrelated to the request."""
