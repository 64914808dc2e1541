"""Typed exceptions for pricing and checkout."""


class PricingError(Exception):
    """Base class for pricing and checkout errors."""


class QuotationRequiredError(PricingError):
    """
    The configured selection cannot be auto-priced.

    Staff must quote it manually before checkout can proceed.
    """

    def __init__(self, service_id: str):
        self.service_id = service_id
        super().__init__(f"Service {service_id} requires a manual quotation before checkout")
