"""Domain models for the wealth tracker."""
from __future__ import annotations

import time
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Mapping, Optional, Union

from dateutil.parser import isoparse

from .config import DEFAULT_GOLD_PURITY, FALLBACK_PRICES, GOLD_PURITIES, asset_type_info


class AssetType(str, Enum):
    CASH = "cash"
    USD = "usd"
    GOLD = "gold"
    SILVER = "silver"
    RENT = "rent"
    INTEREST = "interest"
    SALARY = "salary"


class InterestType(str, Enum):
    SIMPLE = "simple"
    COMPOUND = "compound"


TIME_BASED_TYPES = frozenset({AssetType.RENT, AssetType.INTEREST, AssetType.SALARY})


def _coerce_type(raw: Any) -> Union[AssetType, str]:
    """Known kinds become ``AssetType``; anything else is kept verbatim."""
    try:
        return AssetType(raw)
    except ValueError:
        return str(raw)


def _optional_float(payload: Mapping[str, Any], key: str) -> Optional[float]:
    value = payload.get(key)
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{key} must be numeric, got {value!r}") from exc


def _optional_date(payload: Mapping[str, Any], key: str) -> Optional[date]:
    value = payload.get(key)
    if not value:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return isoparse(str(value)).date()
    except ValueError as exc:
        raise ValueError(f"{key} is not an ISO date: {value!r}") from exc


def _karat(value: Any) -> int:
    try:
        numeric = float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"purity must be an integer, got {value!r}") from exc
    if isinstance(value, bool) or not numeric.is_integer():
        raise ValueError(f"purity must be an integer, got {value!r}")
    return int(numeric)


def _new_id() -> int:
    return int(time.time() * 1000)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Asset:
    """A single holding; optional fields are resolved once at construction."""

    name: str
    type: Union[AssetType, str]
    amount: float = 0.0
    unit: str = ""
    id: int = field(default_factory=_new_id)
    created_at: datetime = field(default_factory=_utcnow)
    purity: Optional[int] = None
    monthly_rent: Optional[float] = None
    monthly_salary: Optional[float] = None
    principal: Optional[float] = None
    interest_rate: Optional[float] = None
    interest_type: Optional[InterestType] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", _coerce_type(self.type))
        if not self.unit:
            object.__setattr__(self, "unit", asset_type_info(self.type)["unit"])
        if self.type == AssetType.GOLD and self.purity is None:
            object.__setattr__(self, "purity", DEFAULT_GOLD_PURITY)
        if self.purity is not None and self.purity not in GOLD_PURITIES:
            raise ValueError(
                f"purity must be one of {sorted(GOLD_PURITIES)}, got {self.purity!r}"
            )
        if self.interest_type is not None:
            object.__setattr__(self, "interest_type", InterestType(self.interest_type))

    @property
    def is_time_based(self) -> bool:
        return self.type in TIME_BASED_TYPES

    @classmethod
    def create(cls, name: str, type: Union[AssetType, str], **fields: Any) -> "Asset":
        """Builds a brand-new asset with a fresh id and creation instant."""
        return cls(name=name, type=type, **fields)

    def replace_with(self, edited: "Asset") -> "Asset":
        """Full-record edit that keeps this asset's identity."""
        return replace(edited, id=self.id, created_at=self.created_at)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Asset":
        if "type" not in payload:
            raise ValueError("asset record has no type")
        kind = _coerce_type(payload["type"])

        purity = payload.get("purity")
        if kind != AssetType.GOLD:
            purity = None
        elif purity is not None:
            purity = _karat(purity)

        created_raw = payload.get("createdAt")
        created_at = isoparse(created_raw) if created_raw else _utcnow()
        asset_id = payload.get("id")

        return cls(
            name=str(payload.get("name", "")),
            type=kind,
            amount=_optional_float(payload, "amount") or 0.0,
            unit=str(payload.get("unit") or ""),
            id=int(asset_id) if asset_id is not None else _new_id(),
            created_at=created_at,
            purity=purity,
            monthly_rent=_optional_float(payload, "monthlyRent"),
            monthly_salary=_optional_float(payload, "monthlySalary"),
            principal=_optional_float(payload, "principal"),
            interest_rate=_optional_float(payload, "interestRate"),
            interest_type=payload.get("interestType") or None,
            start_date=_optional_date(payload, "startDate"),
            end_date=_optional_date(payload, "endDate"),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "type": str(getattr(self.type, "value", self.type)),
            "amount": self.amount,
            "unit": self.unit,
            "createdAt": self.created_at.isoformat(),
        }
        optional = {
            "purity": self.purity,
            "monthlyRent": self.monthly_rent,
            "monthlySalary": self.monthly_salary,
            "principal": self.principal,
            "interestRate": self.interest_rate,
            "interestType": self.interest_type.value if self.interest_type else None,
            "startDate": self.start_date.isoformat() if self.start_date else None,
            "endDate": self.end_date.isoformat() if self.end_date else None,
        }
        data.update({key: value for key, value in optional.items() if value is not None})
        return data


@dataclass(frozen=True)
class MetalPrice:
    """Spot price per troy ounce; ``change`` is informational only."""

    usd: float = 0.0
    egp: float = 0.0
    change: float = 0.0


@dataclass(frozen=True)
class PriceSnapshot:
    gold: MetalPrice = field(default_factory=MetalPrice)
    silver: MetalPrice = field(default_factory=MetalPrice)
    usd_to_egp: float = 0.0

    @classmethod
    def empty(cls) -> "PriceSnapshot":
        return cls()

    @classmethod
    def fallback(cls) -> "PriceSnapshot":
        return cls.from_dict(FALLBACK_PRICES)

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "PriceSnapshot":
        """Parses the provider payload, rejecting anything without numeric prices."""
        if not isinstance(payload, Mapping):
            raise ValueError("price payload must be an object")

        def metal(key: str) -> MetalPrice:
            raw = payload.get(key)
            if not isinstance(raw, Mapping) or not _is_number(raw.get("egp")):
                raise ValueError(f"{key}.egp missing from price payload")
            return MetalPrice(
                usd=float(raw.get("usd") or 0.0),
                egp=float(raw["egp"]),
                change=float(raw.get("change") or 0.0),
            )

        rate = payload.get("usdToEgp")
        if not _is_number(rate):
            raise ValueError("usdToEgp missing from price payload")
        return cls(gold=metal("gold"), silver=metal("silver"), usd_to_egp=float(rate))

    def to_dict(self) -> dict[str, Any]:
        return {
            "gold": {"usd": self.gold.usd, "egp": self.gold.egp, "change": self.gold.change},
            "silver": {
                "usd": self.silver.usd,
                "egp": self.silver.egp,
                "change": self.silver.change,
            },
            "usdToEgp": self.usd_to_egp,
        }


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
