"""Mapping between the spreadsheet's column labels and contract fields."""
from __future__ import annotations

from typing import Any, Dict, Mapping

# Sheet label -> Contract field. Labels are matched case- and
# whitespace-insensitively against the live header row.
COLUMN_MAP: Dict[str, str] = {
    "Tipo de Contrato": "contract_type",
    "Paquete": "package_name",
    "Contratista": "contractor",
    "CUI": "cui",
    "Nombre de la Institución Educativa (I.E.)": "educational_institution",
    "monto del contrato (original)": "original_amount",
    "monto del contrato actualizado": "current_amount",
    "Periodo vigente": "active_period",
    "Fecha de Inicio": "start_date",
    "Fecha de Fin": "end_date",
    "Enlace del contrato y sus adendas": "contract_link",
    "% de avance de ejecución": "progress",
    "última valorización": "last_valuation",
    "Periodo de pago": "payment_period",
    "Documento interno (con Conformidad)": "internal_document",
    "Factura": "invoice",
    "Fecha de presentación de la factura": "invoice_date",
    "Fecha de vencimiento de pago": "payment_due_date",
    "E-SINAD": "e_sinad",
    "Enlace para acceder a los documentos de las valorizaciones": "valuation_documents_link",
    "Garantías de fiel Cumplimiento": "performance_guarantee",
    "% del Precio del contrato": "contract_price_percentage",
    "Acumulado de la retención por fondo de garantía": "retention_accumulated",
    "Enlace para acceder a las garantías y reportes de las mismas": "guarantees_link",
}

IDENTITY_FIELD = "cui"


def normalize_header(label: Any) -> str:
    """Trim and lowercase a header label; non-text labels normalize to ``''``."""

    if not isinstance(label, str):
        return ""
    return label.strip().lower()


def build_header_map(column_map: Mapping[str, str] = COLUMN_MAP) -> Dict[str, str]:
    """Return ``{normalized label: field}`` for fast lookups against live headers."""

    return {normalize_header(label): field for label, field in column_map.items()}


def label_for(field: str, column_map: Mapping[str, str] = COLUMN_MAP) -> str | None:
    """Return the sheet label mapped to ``field`` or ``None`` when unmapped."""

    for label, mapped in column_map.items():
        if mapped == field:
            return label
    return None
