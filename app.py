from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

import matplotlib.pyplot as plt
import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from wealth import (
    ASSET_TYPES,
    GOLD_PURITIES,
    PRICE_REFRESH_SECONDS,
    Asset,
    AssetRepository,
    AssetType,
    InterestType,
    MessageLevel,
    PriceResult,
    PriceService,
    PriceSnapshot,
    ServiceMessage,
    growth_frame,
    growth_summary,
    keep_last_good,
    projected_value_of,
    total_value,
    value_by_type,
    value_of,
)
from wealth.config import HOME_CURRENCY, asset_type_info
from wealth.repositories import UnreadableStoreError

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

# ------------------ Page config ------------------ #
st.set_page_config(page_title="Wealth Tracker", layout="centered")
st.title("💰 Wealth Tracker")


# ------------------ Helpers ------------------ #
def _fmt_money(value: float) -> str:
    return f"{value:,.0f} {HOME_CURRENCY}"


def _fmt_short(value: float) -> str:
    if abs(value) >= 1_000_000:
        return f"{value / 1_000_000:.1f}M"
    if abs(value) >= 1_000:
        return f"{value / 1_000:.0f}K"
    return f"{value:.0f}"


def _type_label(kind) -> str:
    info = asset_type_info(getattr(kind, "value", kind))
    return f"{info['icon']} {info['label']}"


def _hex_to_rgb(hexstr: str):
    h = hexstr.lstrip("#")
    if len(h) != 6:
        return None
    try:
        return tuple(int(h[i : i + 2], 16) for i in (0, 2, 4))
    except ValueError:
        return None


def _theme_is_dark() -> bool:
    base = st.get_option("theme.base")
    if isinstance(base, str):
        return base.lower() == "dark"

    bg = st.get_option("theme.backgroundColor")
    if isinstance(bg, str):
        rgb = _hex_to_rgb(bg)
        if rgb:
            r, g, b = rgb
            return 0.2126 * r + 0.7152 * g + 0.0722 * b < 128
    return False


def _display_messages(messages: Sequence[ServiceMessage], *, stop_on_error: bool = False) -> None:
    has_error = False
    for message in messages:
        if message.level == MessageLevel.ERROR:
            st.error(message.text)
            has_error = True
        elif message.level == MessageLevel.WARNING:
            st.warning(message.text)
        else:
            st.info(message.text)
    if stop_on_error and has_error:
        st.stop()


def _store_write(action, *args) -> bool:
    try:
        action(*args)
    except UnreadableStoreError as exc:
        st.error(f"{exc} Nothing was saved.")
        return False
    return True


def _added_ago(created_at: datetime, now: datetime) -> str:
    days = (now.date() - created_at.astimezone().date()).days
    return "Added today" if days <= 0 else f"Added {days}d ago"


def _time_details(asset: Asset, prices: PriceSnapshot, now: datetime) -> str:
    """Projected total at the end date (or today) plus the accrual window."""
    projected = projected_value_of(asset, asset.end_date or now, prices)
    lines = [f"Projected total: {_fmt_money(projected)}"]
    if asset.start_date:
        lines.append(f"Since {asset.start_date:%d %b %Y}")
    if asset.end_date:
        lines.append(f"Ends {asset.end_date:%d %b %Y}")
    return "  \n".join(lines)


@st.cache_data(ttl=PRICE_REFRESH_SECONDS, show_spinner="Fetching live prices…")
def _fetch_prices() -> PriceResult:
    return PriceService().fetch()


def _load_prices() -> PriceSnapshot:
    previous = st.session_state.get("last_prices")
    last_good = PriceSnapshot.from_dict(previous) if previous else None
    result = keep_last_good(_fetch_prices(), last_good)
    if result.is_live:
        st.session_state["last_prices"] = result.snapshot.to_dict()
    _display_messages(result.messages)
    return result.snapshot


# ------------------ Sections ------------------ #
def _live_prices(prices: PriceSnapshot) -> None:
    col1, col2, col3 = st.columns(3)
    col1.metric(
        "Gold (oz)",
        _fmt_money(prices.gold.egp),
        f"{prices.gold.change:+.2f}%",
        help=f"{prices.gold.usd:,.2f} USD per troy ounce",
    )
    col2.metric(
        "Silver (oz)",
        _fmt_money(prices.silver.egp),
        f"{prices.silver.change:+.2f}%",
        help=f"{prices.silver.usd:,.2f} USD per troy ounce",
    )
    col3.metric("USD → EGP", f"{prices.usd_to_egp:,.2f}")


def _distribution_pie(assets: Sequence[Asset], prices: PriceSnapshot, now: datetime) -> None:
    totals = {kind: value for kind, value in value_by_type(assets, prices, now).items() if value > 0}
    if not totals:
        return

    txt_col = "white" if _theme_is_dark() else "black"
    labels = [asset_type_info(kind)["label"] for kind in totals]
    colors = [asset_type_info(kind)["color"] for kind in totals]

    fig, ax = plt.subplots(facecolor="none")
    ax.set_facecolor("none")
    _, texts, autotexts = ax.pie(
        list(totals.values()),
        labels=labels,
        colors=colors,
        autopct="%1.1f%%",
        startangle=90,
        counterclock=False,
        wedgeprops={"edgecolor": txt_col, "linewidth": 1.0},
    )
    for t in [*texts, *autotexts]:
        t.set_color(txt_col)
        t.set_fontsize(11)
    ax.axis("equal")

    st.subheader("📊 Asset Distribution")
    st.caption(f"{len(totals)} types")
    st.pyplot(fig, transparent=True)
    plt.close(fig)


def _asset_form(key: str, initial: Optional[Asset] = None) -> Optional[Asset]:
    """Renders the add/edit form and returns the submitted asset, if any."""
    kinds = [kind.value for kind in AssetType]
    kind = st.selectbox(
        "Asset type",
        kinds,
        index=kinds.index(initial.type.value) if initial and isinstance(initial.type, AssetType) else 0,
        format_func=_type_label,
        key=f"{key}-type",
    )
    unit = asset_type_info(kind)["unit"]

    with st.form(key, clear_on_submit=initial is None):
        name = st.text_input("Asset name", value=initial.name if initial else "")
        fields: dict = {}

        if kind in (AssetType.RENT.value, AssetType.SALARY.value):
            field = "monthly_rent" if kind == AssetType.RENT.value else "monthly_salary"
            fields[field] = st.number_input(
                f"Monthly amount ({HOME_CURRENCY})",
                min_value=0.0,
                value=float(getattr(initial, field) or 0.0) if initial else 0.0,
                step=500.0,
            )
        elif kind == AssetType.INTEREST.value:
            fields["principal"] = st.number_input(
                f"Principal ({HOME_CURRENCY})",
                min_value=0.0,
                value=float(initial.principal or 0.0) if initial else 0.0,
                step=1000.0,
            )
            fields["interest_rate"] = st.number_input(
                "Annual interest rate (%)",
                min_value=0.0,
                value=float(initial.interest_rate or 0.0) if initial else 0.0,
                step=0.5,
            )
            types = [t.value for t in InterestType]
            fields["interest_type"] = st.radio(
                "Interest type",
                types,
                index=types.index(initial.interest_type.value)
                if initial and initial.interest_type
                else 0,
                horizontal=True,
            )
        else:
            fields["amount"] = st.number_input(
                f"Amount ({unit})",
                min_value=0.0,
                value=float(initial.amount) if initial else 0.0,
                step=0.01,
            )
            if kind == AssetType.GOLD.value:
                fields["purity"] = st.selectbox(
                    "Gold purity",
                    GOLD_PURITIES,
                    index=GOLD_PURITIES.index(initial.purity)
                    if initial and initial.purity in GOLD_PURITIES
                    else 0,
                    format_func=lambda k: f"{k}K" + (" (Pure)" if k == 24 else ""),
                )

        if kind in (AssetType.RENT.value, AssetType.SALARY.value, AssetType.INTEREST.value):
            fields["start_date"] = st.date_input(
                "Start date",
                value=initial.start_date if initial and initial.start_date else date.today(),
            )
            has_end = st.checkbox(
                "Has an end date", value=bool(initial and initial.end_date)
            )
            end_date = st.date_input(
                "End date",
                value=initial.end_date if initial and initial.end_date else date.today(),
            )
            fields["end_date"] = end_date if has_end else None
            if kind == AssetType.INTEREST.value:
                fields["amount"] = fields["principal"]

        submitted = st.form_submit_button("💾 Save changes" if initial else "➕ Add asset")

    if not submitted:
        return None
    if not name:
        st.warning("Please give the asset a name.")
        return None
    end_date = fields.get("end_date")
    if end_date and fields.get("start_date") and end_date < fields["start_date"]:
        st.warning("The end date cannot be earlier than the start date.")
        return None
    return Asset.create(name=name, type=kind, unit=unit, **fields)


def _asset_list(repo: AssetRepository, assets: Sequence[Asset], prices: PriceSnapshot, now: datetime) -> None:
    st.subheader(f"📋 Assets ({len(assets)})")
    if not assets:
        st.info("No assets yet. Add your first one above.")
        return

    for asset in assets:
        col_name, col_value, col_edit, col_delete = st.columns([4, 3, 1, 1])
        col_name.markdown(
            f"**{asset.name}**  \n{_type_label(asset.type)} · {asset.amount:,.2f} {asset.unit}"
            f"  \n{_added_ago(asset.created_at, now)}"
        )
        col_value.markdown(f"**{_fmt_money(value_of(asset, prices, now))}**")
        if asset.is_time_based:
            col_value.markdown(_time_details(asset, prices, now))
        known_kind = isinstance(asset.type, AssetType)
        if col_edit.button(
            "✏️",
            key=f"edit-{asset.id}",
            help="Edit" if known_kind else "This asset type cannot be edited here",
            disabled=not known_kind,
        ):
            st.session_state["editing"] = asset.id
        if col_delete.button("🗑️", key=f"delete-{asset.id}", help="Delete"):
            st.session_state["deleting"] = asset.id

        if st.session_state.get("deleting") == asset.id:
            st.warning(f'Are you sure you want to delete "{asset.name}"? This cannot be undone.')
            col_yes, col_no = st.columns(2)
            if col_yes.button("Delete", key=f"confirm-{asset.id}", type="primary"):
                st.session_state.pop("deleting", None)
                if _store_write(repo.remove, asset.id):
                    st.rerun()
            if col_no.button("Cancel", key=f"cancel-{asset.id}"):
                st.session_state.pop("deleting", None)
                st.rerun()

        if st.session_state.get("editing") == asset.id:
            with st.expander(f"Edit {asset.name}", expanded=True):
                edited = _asset_form(f"edit-form-{asset.id}", initial=asset)
                if st.button("Cancel editing", key=f"cancel-edit-{asset.id}"):
                    st.session_state.pop("editing", None)
                    st.rerun()
            if edited is not None and _store_write(repo.update, asset.replace_with(edited)):
                st.session_state.pop("editing", None)
                st.rerun()


def _projection_chart(assets: Sequence[Asset], prices: PriceSnapshot, now: datetime) -> None:
    df = growth_frame(assets, prices, now=now)
    growth, growth_pct = growth_summary(df)

    st.subheader("📈 12-Month Projection")
    st.caption("Estimated portfolio value over the next 12 months")
    st.metric("Growth over 12 months", f"{_fmt_short(growth)} {HOME_CURRENCY}", f"{growth_pct:.1f}%")

    x_labels = [
        label if i == 0 else f"{label} {year}"
        for i, (label, year) in enumerate(zip(df["label"], df["year"]))
    ]
    fig = go.Figure(
        go.Scatter(
            x=x_labels,
            y=df["value"],
            mode="lines+markers",
            line={"shape": "spline", "color": "#10b981", "width": 2.5},
            fill="tozeroy",
            fillcolor="rgba(16,185,129,0.12)",
            customdata=df[["from_now", "change"]].fillna(0.0),
            hovertemplate="<b>%{x}</b>"
            "<br>%{y:,.0f} " + HOME_CURRENCY
            + "<br>%{customdata[0]:+,.0f} from now"
            "<br>%{customdata[1]:+,.0f} vs previous month"
            "<extra></extra>",
        )
    )
    values = df["value"]
    low, high = values.min() * 0.97, values.max() * 1.02
    fig.update_layout(
        xaxis_title="",
        yaxis_title=HOME_CURRENCY,
        yaxis={"range": [low, high] if high > low else None},
        hovermode="x unified",
    )
    st.plotly_chart(fig, use_container_width=True)

    strip = df.iloc[1:][["label", "change_pct"]].copy()
    strip["change_pct"] = strip["change_pct"].fillna(0.0)
    st.markdown("**Month-over-month growth**")
    st.dataframe(
        pd.DataFrame([strip["change_pct"].round(1).tolist()], columns=strip["label"].tolist())
        .style.format("{:+.1f}%"),
        hide_index=True,
    )
    st.caption(
        "Projection based on current holdings. Market prices (gold, silver, USD) assumed stable. "
        "Rent, salary & interest calculated from their start dates."
    )


def main() -> None:
    repo = AssetRepository()
    assets, repo_messages = repo.load()
    _display_messages(repo_messages)

    prices = _load_prices()
    now = datetime.now()

    _live_prices(prices)
    st.divider()

    col_total, col_count = st.columns(2)
    col_total.metric("Total value", _fmt_money(total_value(assets, prices, now)))
    col_count.metric("Assets", f"{len(assets)} asset" + ("" if len(assets) == 1 else "s"))

    _distribution_pie(assets, prices, now)

    st.subheader("➕ Add New Asset")
    new_asset = _asset_form("add-form")
    if new_asset is not None and _store_write(repo.add, new_asset):
        st.rerun()

    _asset_list(repo, assets, prices, now)

    if assets:
        st.divider()
        _projection_chart(assets, prices, now)


if __name__ == "__main__":
    main()
