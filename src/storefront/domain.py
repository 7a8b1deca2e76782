"""Storefront domain: catalogue, customers, inventory, ordering and payments.

A single Protean domain so that checkout can create an Order and move
Product stock inside one unit of work.
"""

from protean.domain import Domain

from storefront.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

storefront = Domain(name="storefront")
