"""Shipping and payment details collected at checkout."""

import re
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import String, Text

from storefront.domain import storefront

_PHONE_SEPARATORS = re.compile(r"[\s-]")
_PINCODE = re.compile(r"^[0-9]{6}$")


class PaymentMethod(Enum):
    COD = "cod"
    UPI = "upi"
    CARD = "card"


@storefront.value_object
class ShippingForm:
    """A completed checkout form.

    Every text field is required. Construction fails with a ``ValidationError``
    keyed by field name when anything is missing or malformed, so a bad form is
    caught before the backend is ever called.
    """

    customer_name = String(required=True, max_length=255)
    customer_email = String(required=True, max_length=254)
    customer_phone = String(required=True, max_length=20)
    shipping_address = Text(required=True)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    pincode = String(required=True, max_length=10)
    payment_method = String(choices=PaymentMethod, default=PaymentMethod.COD.value)

    @invariant.post
    def email_must_be_well_formed(self):
        email = self.customer_email
        if not email:
            return

        invalid = ValidationError({"customer_email": [f"Invalid email address: {email!r}"]})
        if any(ch.isspace() for ch in email) or email.count("@") != 1:
            raise invalid

        local_part, domain_part = email.split("@", 1)
        if not local_part or local_part.startswith(".") or local_part.endswith("."):
            raise invalid
        if "." not in domain_part or domain_part.startswith(".") or domain_part.endswith("."):
            raise invalid
        if ".." in email:
            raise invalid
        for label in domain_part.split("."):
            if label.startswith("-") or label.endswith("-"):
                raise invalid

    @invariant.post
    def phone_must_be_dialable(self):
        phone = self.customer_phone
        if not phone:
            return

        digits = _PHONE_SEPARATORS.sub("", phone)
        if digits.startswith("+"):
            digits = digits[1:]
        if not digits.isdigit() or not 10 <= len(digits) <= 15:
            raise ValidationError({"customer_phone": ["Phone number must have 10 to 15 digits"]})

    @invariant.post
    def pincode_must_have_six_digits(self):
        if self.pincode and not _PINCODE.match(self.pincode.strip()):
            raise ValidationError({"pincode": ["Pincode must be 6 digits"]})

    def order_fields(self) -> dict:
        """Column values for the ``orders`` row."""
        return {
            "customer_name": self.customer_name.strip(),
            "customer_email": self.customer_email.strip(),
            "customer_phone": self.customer_phone.strip(),
            "shipping_address": self.shipping_address.strip(),
            "city": self.city.strip(),
            "state": self.state.strip(),
            "pincode": self.pincode.strip(),
            "payment_method": self.payment_method,
        }
