"""Service layer abstractions for the wealth tracker."""
from .prices import PriceResult, PriceService, keep_last_good

__all__ = [
    "PriceResult",
    "PriceService",
    "keep_last_good",
]
