"""Data models for contract records read from the backing spreadsheet."""
from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from enum import Enum
from typing import Any, Dict, List, Mapping

# A raw spreadsheet row: cell values in the order of the live header row.
RawRow = List[Any]


class ContractType(str, Enum):
    ECC = "ECC"
    PSC = "PSC"


class ContractStatus(str, Enum):
    ACTIVE = "Activo"
    COMPLETED = "Completado"
    ON_HOLD = "En Pausa"
    CANCELLED = "Cancelado"


NUMERIC_FIELDS = (
    "original_amount",
    "current_amount",
    "progress",
    "contract_price_percentage",
    "retention_accumulated",
)

DATE_FIELDS = (
    "start_date",
    "end_date",
    "last_valuation",
    "invoice_date",
    "payment_due_date",
)

FACET_FIELDS = (
    "contract_type",
    "package_name",
    "contractor",
    "educational_institution",
)

DERIVED_FIELDS = ("id", "status", "total_amount", "execution_progress")


def derive_status(progress: float) -> str:
    """Completed once execution reaches 100%, active otherwise."""

    return ContractStatus.COMPLETED.value if progress >= 100 else ContractStatus.ACTIVE.value


@dataclass
class Contract:
    """A fully decoded contract record.

    ``id``, ``status``, ``total_amount`` and ``execution_progress`` are derived
    from the stored fields every time a row is decoded and are never written
    back to the sheet on their own.
    """

    cui: str = ""
    contract_type: str = ""
    package_name: str = ""
    contractor: str = ""
    educational_institution: str = ""
    original_amount: float = 0.0
    current_amount: float = 0.0
    active_period: str = ""
    start_date: str = ""
    end_date: str = ""
    contract_link: str = ""
    progress: float = 0.0
    last_valuation: str = ""
    payment_period: str = ""
    internal_document: str = ""
    invoice: str = ""
    invoice_date: str = ""
    payment_due_date: str = ""
    e_sinad: str = ""
    valuation_documents_link: str = ""
    performance_guarantee: str = ""
    contract_price_percentage: float = 0.0
    retention_accumulated: float = 0.0
    guarantees_link: str = ""
    id: str = ""
    status: str = ContractStatus.ACTIVE.value
    total_amount: float = 0.0
    execution_progress: float = 0.0

    @property
    def key(self) -> str:
        """Identifying key as text, used for lookups and sorting."""

        return str(self.cui)

    def to_dict(self) -> Dict[str, Any]:
        """Return a plain dictionary representation for JSON responses."""

        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Contract":
        """Build a contract from a wire mapping, ignoring unknown keys."""

        known = {field.name for field in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})
