"""Custom exceptions for the trainer marketplace."""


class MarketplaceException(Exception):
    """Base exception for all marketplace-related errors."""
    pass


class TrainerNotFoundException(MarketplaceException):
    """Raised when a trainer cannot be found in storage."""
    pass


class ListingNotFoundException(MarketplaceException):
    """Raised when a listing cannot be found in storage."""
    pass


class DuplicateTrainerException(MarketplaceException):
    """Raised when a trainer signs up with an email that is already registered."""
    pass


class ValidationException(MarketplaceException):
    """Raised when validation fails."""
    pass


class TableStorageException(Exception):
    """Base exception for table storage operations."""
    pass


class EntityUpsertException(TableStorageException):
    """Exception raised when entity upsert operation fails."""
    pass


class EntityQueryException(TableStorageException):
    """Exception raised when entity query operation fails."""
    pass


class EntityDeleteException(TableStorageException):
    """Exception raised when entity delete operation fails."""
    pass


class EntityNotFoundException(TableStorageException):
    """Exception raised when an entity is not found in table storage."""
    pass


class NotificationException(Exception):
    """Base exception for notification operations."""
    pass


class EmailDeliveryException(NotificationException):
    """Exception raised when the mail transport rejects a message."""
    pass
