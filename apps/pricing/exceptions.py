"""
Exceptions raised by the pricing engine.
"""


class PricingError(ValueError):
    """Base class for invalid pricing inputs."""


class InvalidChargeConfig(PricingError):
    """Making charge kind/value cannot be applied to the given line."""


class InvalidDiscountPolicy(PricingError):
    """Discount type or value is not acceptable."""
