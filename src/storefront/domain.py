"""Storefront bounded context — cart, delivery pricing, checkout and orders.

The storefront keeps a client-owned cart ledger, prices delivery against the
configured delivery options, and turns a cart plus a shipping form into
persisted order records through the row-store port.
"""

from protean.domain import Domain

from storefront.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

logger = get_logger(__name__)

# Domain Composition Root
storefront = Domain(name="storefront")
