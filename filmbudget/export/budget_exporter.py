"""Mini README: CSV export of a project's budget calculation.

Structure:
    * BudgetExporter - renders positions, category summary and the
      planned-versus-actual totals of one project snapshot as CSV.

The output uses semicolons and German decimal commas so the file opens
directly in spreadsheet applications configured for a German locale.
Positions keep the order of the snapshot, which follows ``sort_order``.
"""

from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import List

from ..calculation import (
    PER_DIEM_LABEL,
    ProjectSnapshot,
    compare,
    cost_of,
    hotel_nights,
    summarize,
)
from ..logging_utils import get_logger
from .formatting import format_amount

LOGGER = get_logger(__name__)

POSITION_HEADER = ["Typ", "Name", "Aktiv", "Summe", "Kalkuliert", "Realkosten", "Differenz"]

SUMMARY_LABELS = [
    ("crew", "Crew"),
    ("darsteller", "Darsteller"),
    ("hotel", "Hotel"),
    ("travel", "Reisekosten"),
    ("leihe", "Leihe"),
    ("location", "Location"),
    ("sonstiges", "Sonstiges"),
    ("total", "Gesamt"),
]


class BudgetExporter:
    """Serialise a project's calculation to CSV."""

    def __init__(self, delimiter: str = ";") -> None:
        self.delimiter = delimiter

    def render(self, project: ProjectSnapshot) -> str:
        """Return the CSV document as a string."""

        buffer = io.StringIO()
        writer = csv.writer(buffer, delimiter=self.delimiter, lineterminator="\n")
        for row in self._rows(project):
            writer.writerow(row)
        return buffer.getvalue()

    def export(self, project: ProjectSnapshot, destination: Path) -> Path:
        """Write the CSV document to ``destination`` and return the path."""

        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(self.render(project), encoding="utf-8")
        LOGGER.info(
            "Exported %s positions of project %s to %s",
            len(project.positions),
            project.project_id,
            destination,
        )
        return destination

    def _rows(self, project: ProjectSnapshot) -> List[List[str]]:
        comparison = compare(project)
        by_position = {row.position_id: row for row in comparison.rows if not row.is_per_diem}

        rows: List[List[str]] = [["Projekt", project.name], [], POSITION_HEADER]
        for position in project.positions:
            compared = by_position.get(position.position_id)
            rows.append(
                [
                    position.position_type.label,
                    position.name,
                    "ja" if position.active else "nein",
                    format_amount(cost_of(position, project)),
                    format_amount(compared.calculated) if compared else "",
                    format_amount(compared.actual) if compared else "",
                    format_amount(compared.difference) if compared else "",
                ]
            )
        if comparison.total_per_diem > 0:
            actual_per_diem = project.actual_per_diem
            rows.append(
                [
                    PER_DIEM_LABEL,
                    "",
                    "",
                    "",
                    format_amount(comparison.total_per_diem),
                    format_amount(actual_per_diem),
                    format_amount(comparison.total_per_diem - actual_per_diem),
                ]
            )

        summary = summarize(project).as_dict()
        rows.append([])
        rows.append(["Kategorie", "Summe"])
        rows.extend([label, format_amount(summary[key])] for key, label in SUMMARY_LABELS)
        rows.append(["Hotelnächte", str(hotel_nights(project))])

        rows.append([])
        rows.append(["Kalkuliert", format_amount(comparison.total_calculated)])
        rows.append(["Realkosten", format_amount(comparison.total_actual)])
        rows.append(["Differenz", format_amount(comparison.difference)])
        return rows
