from __future__ import annotations


class TieredDiscountError(Exception):
    """Base class for every error raised by the tiered discount core."""


class InvalidConfiguration(TieredDiscountError):
    """A promotion definition breaks a tier or quantity rule (rejected at set-up time)."""


class InsufficientInventory(TieredDiscountError):
    """The requested quantity exceeds the promotional units still available."""

    def __init__(self, product_id: int, requested: int, remaining: int) -> None:
        self.product_id = product_id
        self.requested = requested
        self.remaining = remaining
        super().__init__(
            f"Product {product_id}: requested {requested} promotional unit(s) "
            f"but only {remaining} remain."
        )


class AllocationContention(TieredDiscountError):
    """Every commit attempt lost the compare-and-swap race; nothing was written."""

    def __init__(self, product_id: int, attempts: int) -> None:
        self.product_id = product_id
        self.attempts = attempts
        super().__init__(
            f"Product {product_id}: allocation did not commit after {attempts} attempt(s) "
            f"because of concurrent orders. Please try again."
        )


class StorageUnavailable(TieredDiscountError):
    """The promotion store could not be read or written."""
