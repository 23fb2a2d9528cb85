"""Failure kinds returned in Either.left by the engine."""

import enum
from dataclasses import dataclass

from .ftypes import Either


class ErrorKind(enum.Enum):
    OUT_OF_STOCK = "OutOfStock"
    STOCK_EXCEEDED = "StockExceeded"
    LINE_NOT_FOUND = "LineNotFound"
    DUPLICATE_CODE = "DuplicateCode"
    NOT_FOUND = "NotFound"
    MINIMUM_NOT_MET = "MinimumNotMet"
    INVALID_NAME = "InvalidName"
    INVALID_PRICE = "InvalidPrice"
    INVALID_STOCK = "InvalidStock"
    INVALID_TIER_QUANTITY = "InvalidTierQuantity"
    INVALID_TIER_RATE = "InvalidTierRate"
    DUPLICATE_TIER_QUANTITY = "DuplicateTierQuantity"
    INDEX_OUT_OF_RANGE = "IndexOutOfRange"


@dataclass(frozen=True)
class Failure:
    """Recoverable validation failure with a message fit for a notification."""

    kind: ErrorKind
    message: str

    def __str__(self) -> str:
        return self.message


def fail(kind: ErrorKind, message: str) -> Either:
    return Either.left(Failure(kind, message))


class StorageError(Exception):
    """Raised when the key-value document cannot be read or decoded."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot load store at {path}: {reason}")
