"""Tests for asset and price snapshot construction at the storage boundary."""

from datetime import date, datetime, timezone

import pytest

from wealth.config import asset_type_info
from wealth.models import Asset, AssetType, InterestType, PriceSnapshot


class TestAssetFromDict:
    def test_gold_defaults_to_pure(self):
        asset = Asset.from_dict({"id": 1, "name": "Bar", "type": "gold", "amount": 10})

        assert asset.type is AssetType.GOLD
        assert asset.purity == 24
        assert asset.unit == "grams"

    def test_purity_is_dropped_for_other_types(self):
        asset = Asset.from_dict({"id": 1, "name": "Coins", "type": "silver", "purity": 21})

        assert asset.purity is None

    def test_invalid_purity_is_rejected(self):
        with pytest.raises(ValueError):
            Asset.from_dict({"id": 1, "name": "Bar", "type": "gold", "purity": 12})

    def test_non_numeric_amount_is_rejected(self):
        with pytest.raises(ValueError):
            Asset.from_dict({"id": 1, "name": "Cash", "type": "cash", "amount": "lots"})

    def test_missing_type_is_rejected(self):
        with pytest.raises(ValueError):
            Asset.from_dict({"id": 1, "name": "Mystery"})

    def test_reads_camel_case_fields(self):
        asset = Asset.from_dict(
            {
                "id": 1700000000000,
                "name": "Deposit",
                "type": "interest",
                "amount": 1000,
                "unit": "EGP",
                "createdAt": "2024-01-01T09:30:00.000Z",
                "principal": 1000,
                "interestRate": 18.5,
                "interestType": "compound",
                "startDate": "2024-01-01",
                "endDate": "2025-01-01",
            }
        )

        assert asset.id == 1700000000000
        assert asset.interest_type is InterestType.COMPOUND
        assert asset.interest_rate == 18.5
        assert asset.start_date == date(2024, 1, 1)
        assert asset.end_date == date(2025, 1, 1)
        assert asset.created_at == datetime(2024, 1, 1, 9, 30, tzinfo=timezone.utc)
        assert asset.is_time_based

    def test_unknown_type_is_kept(self):
        asset = Asset.from_dict({"id": 1, "name": "Token", "type": "crypto", "amount": 3})

        assert asset.type == "crypto"
        assert asset.to_dict()["type"] == "crypto"
        assert not asset.is_time_based

    def test_to_dict_omits_unset_fields(self):
        asset = Asset(name="Wallet", type=AssetType.CASH, amount=50, id=7)

        data = asset.to_dict()

        assert data["type"] == "cash"
        assert data["unit"] == "EGP"
        assert "purity" not in data
        assert "startDate" not in data
        assert Asset.from_dict(data) == asset


class TestAssetIdentity:
    def test_create_assigns_id_and_timestamp(self):
        asset = Asset.create("Wallet", AssetType.CASH, amount=10)

        assert asset.id > 0
        assert asset.created_at.tzinfo is not None

    def test_replace_with_keeps_identity(self):
        original = Asset(
            name="Old",
            type=AssetType.CASH,
            amount=1,
            id=11,
            created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )
        edited = Asset(name="New", type=AssetType.USD, amount=5, id=99)

        result = original.replace_with(edited)

        assert result.id == 11
        assert result.created_at == original.created_at
        assert result.name == "New"
        assert result.type is AssetType.USD


class TestPriceSnapshot:
    def test_from_dict(self):
        snapshot = PriceSnapshot.from_dict(
            {
                "gold": {"usd": 2600, "egp": 130000, "change": 1.2},
                "silver": {"usd": 31, "egp": 1550, "change": -0.5},
                "usdToEgp": 50,
            }
        )

        assert snapshot.gold.egp == 130000.0
        assert snapshot.silver.change == -0.5
        assert snapshot.usd_to_egp == 50.0
        assert PriceSnapshot.from_dict(snapshot.to_dict()) == snapshot

    @pytest.mark.parametrize(
        "payload",
        [
            None,
            {"gold": {"egp": 1}, "silver": {"egp": 1}},
            {"gold": {"egp": "1"}, "silver": {"egp": 1}, "usdToEgp": 49},
            {"gold": {"egp": 1}, "usdToEgp": 49},
            {"gold": {"egp": 1}, "silver": {"egp": 1}, "usdToEgp": True},
        ],
    )
    def test_malformed_payload_is_rejected(self, payload):
        with pytest.raises(ValueError):
            PriceSnapshot.from_dict(payload)

    def test_fallback_values(self):
        snapshot = PriceSnapshot.fallback()

        assert snapshot.gold.usd == 5000
        assert snapshot.gold.egp == 250000
        assert snapshot.silver.egp == 5000
        assert snapshot.usd_to_egp == 49

    def test_empty_is_all_zero(self):
        snapshot = PriceSnapshot.empty()

        assert snapshot.gold.egp == 0
        assert snapshot.silver.egp == 0
        assert snapshot.usd_to_egp == 0


class TestPurityAndKinds:
    @pytest.mark.parametrize("purity", [21.7, "22.5", True, "gold"])
    def test_non_integral_purity_is_rejected(self, purity):
        with pytest.raises(ValueError):
            Asset.from_dict({"id": 1, "name": "Ring", "type": "gold", "purity": purity})

    @pytest.mark.parametrize("purity", [21, 21.0, "21"])
    def test_integral_purity_is_accepted(self, purity):
        asset = Asset.from_dict({"id": 1, "name": "Ring", "type": "gold", "purity": purity})

        assert asset.purity == 21

    def test_unknown_kind_is_labelled_by_its_own_name(self):
        assert asset_type_info("crypto")["label"] == "crypto"
        assert asset_type_info(AssetType.GOLD)["label"] == "Gold"
