from enum import Enum


class PricingTier(Enum):
    """Closed pricing vocabulary (a literal amount like "$29" is also allowed)"""
    FREE = "Free"
    FREEMIUM = "Freemium"
    OPEN_SOURCE = "Open Source"
    PAID = "Paid"
    CONTACT = "Contact for Pricing"
