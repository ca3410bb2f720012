"""Error types raised by the vault components."""


class VaultError(Exception):
    """Base class for every error the vault raises on purpose."""


class ValidationError(VaultError):
    """Upload is missing a field or carries an unusable value."""


class ConflictError(VaultError):
    """An original already exists for the id being written."""


class NotFoundError(VaultError):
    """Requested record or file does not exist."""


class DecodeError(VaultError):
    """Original bytes could not be decoded as an image."""


class StoreError(VaultError):
    """Relational store is unreachable or rejected the statement."""
