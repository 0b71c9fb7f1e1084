"""
Error kinds raised by the card store.

Every message is meant to be shown to the user as-is.
"""

from utils.constants import (
    DUPLICATE_CARD_MSG,
    INVALID_DESTINATION_MSG,
    RESERVED_NAME_MSG,
)


class CardStoreError(Exception):
    default_message = "Card store error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self)


class InvalidName(CardStoreError):
    default_message = "Name cannot be empty"


class ReservedName(CardStoreError):
    default_message = RESERVED_NAME_MSG


class DuplicateCard(CardStoreError):
    default_message = DUPLICATE_CARD_MSG


class NotFound(CardStoreError):
    default_message = "Not found"


class InvalidDestination(CardStoreError):
    default_message = INVALID_DESTINATION_MSG


class IoFailure(CardStoreError):
    default_message = "File operation failed"
