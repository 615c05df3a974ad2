"""Client-side cache of contracts with filtering and post-confirmation updates."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping

from contract_tracker.client.filters import ContractFilter, filter_contracts
from contract_tracker.client.service import ContractService
from contract_tracker.client.state import (
    CacheState,
    CreateSucceeded,
    DeleteSucceeded,
    Event,
    FetchFailed,
    FetchStarted,
    FetchSucceeded,
    OperationFailed,
    UpdateSucceeded,
    reduce,
    unique_values,
)
from contract_tracker.client.summary import ContractSummary, summarize
from contract_tracker.core.errors import ContractTrackerError
from contract_tracker.core.models import Contract

logger = logging.getLogger(__name__)


class ContractCache:
    """Local mirror of every contract plus the filtered view derived from it.

    ``refresh`` replaces the mirror wholesale. ``create``, ``edit``, and
    ``remove`` call the API first and only touch the mirror once it has
    answered successfully; a failure leaves the mirror as it was.
    """

    def __init__(self, service: ContractService) -> None:
        self.service = service
        self.state = CacheState()
        self.filters = ContractFilter()
        self.search_term = ""
        self._visible: List[Contract] = []
        self._facets: Dict[str, List[str]] = unique_values([])

    @property
    def records(self) -> List[Contract]:
        return list(self.state.records)

    @property
    def visible_records(self) -> List[Contract]:
        return list(self._visible)

    @property
    def facets(self) -> Dict[str, List[str]]:
        return self._facets

    @property
    def loading(self) -> bool:
        return self.state.loading

    @property
    def last_error(self) -> str | None:
        return self.state.error

    @property
    def summary(self) -> ContractSummary:
        return summarize(self._visible)

    def refresh(self) -> None:
        """Reload every contract; failures are recorded, not raised."""

        self._dispatch(FetchStarted())
        try:
            records = self.service.get_contracts()
        except ContractTrackerError as exc:
            logger.exception("Failed to load contracts")
            self._dispatch(FetchFailed(f"Failed to load contracts: {exc}"))
            return
        self._dispatch(FetchSucceeded(tuple(records)))

    def create(self, draft: Mapping[str, Any]) -> Contract:
        try:
            created = self.service.create_contract(draft)
        except ContractTrackerError as exc:
            self._fail("Failed to create contract", exc)
            raise
        self._dispatch(CreateSucceeded(created))
        return created

    def edit(self, record: Contract) -> Contract:
        try:
            updated = self.service.update_contract(record)
        except ContractTrackerError as exc:
            self._fail("Failed to update contract", exc)
            raise
        self._dispatch(UpdateSucceeded(updated))
        return updated

    def remove(self, key: str) -> None:
        try:
            self.service.delete_contract(key)
        except ContractTrackerError as exc:
            self._fail("Failed to delete contract", exc)
            raise
        self._dispatch(DeleteSucceeded(key))

    def set_filters(self, filters: ContractFilter) -> None:
        self.filters = filters
        self._refilter()

    def clear_filters(self) -> None:
        self.set_filters(ContractFilter())

    def set_search_term(self, term: str) -> None:
        self.search_term = term or ""
        self._refilter()

    def _fail(self, prefix: str, exc: Exception) -> None:
        logger.error("%s: %s", prefix, exc)
        self._dispatch(OperationFailed(f"{prefix}: {exc}"))

    def _dispatch(self, event: Event) -> None:
        previous = self.state.records
        self.state = reduce(self.state, event)
        if self.state.records is not previous:
            self._facets = unique_values(self.state.records)
            self._refilter()

    def _refilter(self) -> None:
        self._visible = filter_contracts(self.state.records, self.filters, self.search_term)
