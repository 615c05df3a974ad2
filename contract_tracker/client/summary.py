"""Headline metrics shown above the contracts table."""
from dataclasses import dataclass
from typing import Iterable

from contract_tracker.core.models import Contract, ContractStatus


@dataclass(frozen=True)
class ContractSummary:
    total: int
    active: int
    active_share: int
    total_amount: float
    average_progress: float


def summarize(records: Iterable[Contract]) -> ContractSummary:
    """Count, active share, summed amount, and mean progress of ``records``."""

    records = list(records)
    total = len(records)
    active = len([record for record in records if record.status == ContractStatus.ACTIVE.value])
    total_amount = sum(record.total_amount for record in records)
    average_progress = (
        sum(record.execution_progress for record in records) / total if total else 0.0
    )
    return ContractSummary(
        total=total,
        active=active,
        active_share=round(active / total * 100) if total else 0,
        total_amount=total_amount,
        average_progress=round(average_progress, 1),
    )
