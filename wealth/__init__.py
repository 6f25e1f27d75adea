"""Personal wealth tracking domain package."""

from .config import ASSET_TYPES, GOLD_PURITIES, PRICE_REFRESH_SECONDS
from .messages import MessageLevel, ServiceMessage, has_errors
from .models import Asset, AssetType, InterestType, MetalPrice, PriceSnapshot
from .projection import ProjectionPoint, growth_frame, growth_summary, project
from .repositories import AssetRepository
from .services import PriceResult, PriceService, keep_last_good
from .valuation import (
    complete_months_elapsed,
    projected_value_of,
    total_value,
    value_by_type,
    value_of,
)

__all__ = [
    "ASSET_TYPES",
    "Asset",
    "AssetRepository",
    "AssetType",
    "GOLD_PURITIES",
    "InterestType",
    "MessageLevel",
    "MetalPrice",
    "PRICE_REFRESH_SECONDS",
    "PriceResult",
    "PriceService",
    "PriceSnapshot",
    "ProjectionPoint",
    "ServiceMessage",
    "complete_months_elapsed",
    "growth_frame",
    "growth_summary",
    "has_errors",
    "keep_last_good",
    "project",
    "projected_value_of",
    "total_value",
    "value_by_type",
    "value_of",
]
