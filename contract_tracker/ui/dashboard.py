"""Streamlit dashboard to browse, filter, create, edit, and delete contracts."""
from datetime import date
from pathlib import Path
from typing import Any, Callable, Dict

import streamlit as st

# Allow running via "streamlit run contract_tracker/ui/dashboard.py" without installing
# the package by ensuring the repository root is on ``sys.path``.
if __package__ in {None, ""}:
    import sys

    sys.path.append(str(Path(__file__).resolve().parents[2]))

from contract_tracker.client.cache import ContractCache
from contract_tracker.client.filters import ContractFilter
from contract_tracker.client.service import ContractService, draft_from_contract
from contract_tracker.core.config import api_base_url
from contract_tracker.core.errors import ContractTrackerError
from contract_tracker.core.logging import configure_logging
from contract_tracker.core.models import Contract, ContractType
from contract_tracker.core.validation import validate_contract

FLASH_KEY = "contract_flash"

TABLE_COLUMNS = {
    "CUI": "cui",
    "Institution": "educational_institution",
    "Contractor": "contractor",
    "Package": "package_name",
    "Type": "contract_type",
    "Status": "status",
    "Progress (%)": "execution_progress",
    "Total amount": "total_amount",
    "Start": "start_date",
    "End": "end_date",
}


def _session_cache() -> ContractCache:
    """Create the cache once per session and load it on first use."""

    if "contract_cache" not in st.session_state:
        cache = ContractCache(ContractService(api_base_url()))
        with st.spinner("Loading contracts..."):
            cache.refresh()
        st.session_state.contract_cache = cache
    return st.session_state.contract_cache


def _rerun_app() -> None:
    """Trigger a Streamlit rerun, compatible with newer and older APIs."""

    rerun = getattr(st, "rerun", None) or getattr(st, "experimental_rerun", None)
    if not rerun:
        raise RuntimeError("Streamlit does not expose a rerun helper.")
    rerun()


def _apply(action: Callable[[], Any], success: str) -> None:
    """Run a cache mutation, then rerun so the table above shows the result."""

    try:
        action()
    except ContractTrackerError as exc:
        st.error(str(exc))
        return
    st.session_state[FLASH_KEY] = success
    _rerun_app()


def _show_flash() -> None:
    message = st.session_state.pop(FLASH_KEY, None)
    if message:
        st.success(message)


def _sidebar_filters(cache: ContractCache) -> None:
    facets = cache.facets
    with st.sidebar:
        st.header("Filters")
        selected = {}
        labels = {
            "contract_type": "Contract type",
            "package_name": "Package",
            "contractor": "Contractor",
            "educational_institution": "Institution",
        }
        for field_name, label in labels.items():
            options = ["", *facets.get(field_name, [])]
            current = getattr(cache.filters, field_name) or ""
            index = options.index(current) if current in options else 0
            selected[field_name] = st.selectbox(
                label, options, index=index, format_func=lambda value: value or "All"
            )
        if st.button("Clear filters"):
            cache.clear_filters()
            _rerun_app()
        cache.set_filters(ContractFilter(**selected))


def _summary_metrics(cache: ContractCache) -> None:
    summary = cache.summary
    cols = st.columns(4)
    cols[0].metric("Total contracts", summary.total)
    cols[1].metric("Active contracts", summary.active, help=f"{summary.active_share}% of total")
    cols[2].metric("Total amount", f"{summary.total_amount:,.0f}")
    cols[3].metric("Average progress", f"{summary.average_progress}%")


def _date_value(raw: str) -> date | None:
    try:
        return date.fromisoformat(raw) if raw else None
    except ValueError:
        return None


def _contract_form(key: str, initial: Dict[str, Any]) -> Dict[str, Any] | None:
    """Render the create/edit form and return submitted values, if any."""

    types = [member.value for member in ContractType]
    with st.form(key):
        cols = st.columns(2)
        values: Dict[str, Any] = {
            "cui": cols[0].text_input("CUI", initial.get("cui", ""), disabled=key == "edit_form"),
            "educational_institution": cols[1].text_input(
                "Institution", initial.get("educational_institution", "")
            ),
            "contractor": cols[0].text_input("Contractor", initial.get("contractor", "")),
            "package_name": cols[1].text_input("Package", initial.get("package_name", "")),
            "contract_type": cols[0].selectbox(
                "Contract type",
                types,
                index=types.index(initial["contract_type"]) if initial.get("contract_type") in types else 0,
            ),
            "progress": cols[1].number_input(
                "Execution progress (%)", value=float(initial.get("progress", 0.0)), step=1.0
            ),
            "original_amount": cols[0].number_input(
                "Original amount", value=float(initial.get("original_amount", 0.0)), step=100.0
            ),
            "current_amount": cols[1].number_input(
                "Current amount", value=float(initial.get("current_amount", 0.0)), step=100.0
            ),
            "start_date": cols[0].date_input("Start date", _date_value(initial.get("start_date", ""))),
            "end_date": cols[1].date_input("End date", _date_value(initial.get("end_date", ""))),
            "contract_link": st.text_input("Contract link", initial.get("contract_link", "")),
        }
        submitted = st.form_submit_button("Save")

    if not submitted:
        return None
    for field_name in ("start_date", "end_date"):
        values[field_name] = values[field_name].isoformat() if values[field_name] else ""
    merged = {**initial, **values}
    errors = validate_contract(merged)
    for field_name, message in errors.items():
        st.error(f"{field_name}: {message}")
    return None if errors else merged


def main() -> None:
    """Launch the contracts dashboard."""

    configure_logging()
    st.set_page_config(page_title="Contract Tracker", layout="wide")
    st.title("Contract Tracker")

    cache = _session_cache()
    if st.button("Reload data", type="secondary"):
        cache.refresh()
    _show_flash()
    if cache.last_error:
        st.error(cache.last_error)

    _sidebar_filters(cache)
    cache.set_search_term(st.text_input("Search institution, CUI, or contractor"))
    _summary_metrics(cache)

    visible = cache.visible_records
    st.dataframe(
        [{label: getattr(record, field) for label, field in TABLE_COLUMNS.items()} for record in visible],
        hide_index=True,
        use_container_width=True,
    )
    if cache.loading:
        st.info("Loading...")

    create_tab, edit_tab = st.tabs(["New contract", "Edit or delete"])
    with create_tab:
        draft = _contract_form("create_form", {})
        if draft is not None:
            _apply(lambda: cache.create(draft), f"Created contract {draft['cui']}")

    with edit_tab:
        keys = [record.cui for record in visible]
        if not keys:
            st.caption("No contracts match the current filters.")
            return
        selected_key = st.selectbox("Contract", keys)
        record = next(record for record in visible if record.cui == selected_key)
        changes = _contract_form("edit_form", draft_from_contract(record))
        if changes is not None:
            _apply(
                lambda: cache.edit(Contract.from_dict({**changes, "cui": record.cui})),
                f"Updated contract {record.cui}",
            )
        if st.button("Delete contract", type="primary"):
            _apply(lambda: cache.remove(record.cui), f"Deleted contract {record.cui}")


if __name__ == "__main__":
    main()
