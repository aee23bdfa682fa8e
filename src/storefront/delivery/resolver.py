"""Delivery charge resolution.

Everything here is a pure function of (selected option id, cart subtotal,
active options). Callers recompute on every change to any of the three instead
of holding on to a charge, so the charge can never go stale when the cart
changes after an option was picked.
"""

from dataclasses import dataclass

from storefront.delivery.options import DeliveryOption


def find_option(selected_id, options: list[DeliveryOption]) -> DeliveryOption | None:
    if selected_id is None:
        return None
    return next((o for o in options if str(o.option_id) == str(selected_id)), None)


def default_option_id(selected_id, options: list[DeliveryOption]) -> str | None:
    """The id to preselect: ``selected_id`` when it names an option, else the first option."""
    option = find_option(selected_id, options)
    if option is not None:
        return str(option.option_id)
    return str(options[0].option_id) if options else None


def _standard_rate(options: list[DeliveryOption]) -> int:
    fallback = next((o for o in options if not o.is_free), None)
    return fallback.charge if fallback is not None else 0


def resolve_delivery_charge(selected_id, subtotal: int, options: list[DeliveryOption]) -> int:
    """Delivery charge in paise for the selected option at this subtotal.

    - Unknown option: 0.
    - Free option with a minimum: 0 once ``subtotal >= min_order_amount``,
      otherwise the charge of the first non-free option (0 if there is none).
    - Free option without a minimum: always 0.
    - Paid option: its own charge.
    """
    selected = find_option(selected_id, options)
    if selected is None:
        return 0

    if selected.is_free:
        if selected.min_order_amount is None:
            return 0
        if subtotal >= selected.min_order_amount:
            return 0
        return _standard_rate(options)

    return selected.charge


@dataclass(frozen=True)
class DeliveryQuote:
    """Resolved delivery pricing for display and checkout."""

    option: DeliveryOption | None
    charge: int
    amount_to_free_delivery: int = 0

    @property
    def is_free(self) -> bool:
        return self.option is not None and self.charge == 0


def quote_delivery(selected_id, subtotal: int, options: list[DeliveryOption]) -> DeliveryQuote:
    """Resolve the charge and, for a free-above-minimum option, how far the cart is from it."""
    option = find_option(selected_id, options)
    charge = resolve_delivery_charge(selected_id, subtotal, options)

    shortfall = 0
    if option is not None and option.is_free and option.min_order_amount is not None:
        shortfall = max(option.min_order_amount - subtotal, 0)

    return DeliveryQuote(option=option, charge=charge, amount_to_free_delivery=shortfall)
