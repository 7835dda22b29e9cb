"""Error taxonomy for product lookups and persistence."""


class ProductLookupError(Exception):
    """Base class for failures reported by a ProductSource."""

    def __init__(self, identifier: str, message: str = ""):
        self.identifier = identifier
        super().__init__(message or f"Lookup failed for {identifier}")


class ProductNotFound(ProductLookupError):
    """The source answered, but holds no product for this identifier."""

    def __init__(self, identifier: str, message: str = ""):
        super().__init__(identifier, message or f"No product found for {identifier}")


class ProductNetworkError(ProductLookupError):
    """Transport failure or non-success response from the source."""

    def __init__(self, identifier: str, message: str = "", status_code: int | None = None):
        self.status_code = status_code
        super().__init__(identifier, message or f"Network error while looking up {identifier}")


class LookupSuperseded(Exception):
    """A newer lookup started while this one was waiting on the source."""

    def __init__(self, identifier: str, token: int, latest_token: int):
        self.identifier = identifier
        self.token = token
        self.latest_token = latest_token
        super().__init__(f"Lookup {token} for {identifier} superseded by lookup {latest_token}")


class PersistenceFailure(Exception):
    """Reading or writing the key/value store failed."""

    def __init__(self, key: str, reason: str = ""):
        self.key = key
        super().__init__(f"Persistence failure for '{key}': {reason}" if reason else f"Persistence failure for '{key}'")


__all__ = [
    'ProductLookupError', 'ProductNotFound', 'ProductNetworkError',
    'LookupSuperseded', 'PersistenceFailure'
]
