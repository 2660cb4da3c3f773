"""
Catalog error taxonomy.

Timeouts use the builtin TimeoutError. Everything the source can do wrong
is a CatalogError; only CatalogUnavailableError ever reaches API callers.
"""


class CatalogError(Exception):
    """Base class for card catalog failures."""

    pass


class TransientFetchError(CatalogError):
    """
    Network or upstream failure that is worth retrying.

    Raised for connection errors, HTTP 429 and HTTP 5xx responses.
    """

    pass


class CatalogFetchError(CatalogError):
    """Upstream answered with something retrying will not fix."""

    pass


class CatalogUnavailableError(CatalogError):
    """
    No catalog can be served.

    The top-level fetch failed after all retries and there is no cached
    snapshot to fall back on. Callers should treat this as "try again shortly".
    """

    pass


class DegradedServiceWarning(UserWarning):
    """Emitted when a stale snapshot is served because a refresh failed."""

    pass
