"""Checkout failures that reach the shopper.

Form problems are Protean ``ValidationError``s and never get this far; these
cover what can go wrong once the order is being written.
"""


class CheckoutError(Exception):
    """Base class for checkout submission failures."""


class CheckoutInProgress(CheckoutError):
    """A submission for this cart is already waiting on the backend."""


class OrderWriteFailed(CheckoutError):
    """The backend rejected or never acknowledged the order write.

    Nothing was cleared; the shopper can submit again.
    """


class PartialOrderCommit(OrderWriteFailed):
    """The order header was stored but its line items were not.

    The header stays behind without items and is not rolled back. ``order_id``
    names it so it can be reconciled by hand.
    """

    def __init__(self, message: str, order_id: str) -> None:
        super().__init__(message)
        self.order_id = order_id
