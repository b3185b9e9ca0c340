"""Mini README: Tests for currency formatting and the CSV exporter."""

from __future__ import annotations

from filmbudget.calculation import PositionSnapshot, PositionType, ProjectSnapshot
from filmbudget.export import BudgetExporter, format_amount, format_currency, format_difference


def test_format_currency_uses_german_grouping() -> None:
    assert format_currency(1810) == "1.810,00 €"
    assert format_currency(1234567.891) == "1.234.567,89 €"
    assert format_currency(None) == "0,00 €"
    assert format_amount(-35.5) == "-35,50"


def test_format_difference_marks_surplus() -> None:
    assert format_difference(120) == "+120,00 €"
    assert format_difference(-35) == "-35,00 €"
    assert format_difference(0) == "+0,00 €"


def test_export_writes_positions_in_order(tmp_path) -> None:
    project = ProjectSnapshot(
        project_id="p1",
        name="Imagefilm",
        shooting_days=2,
        per_diem=15.0,
        actual_per_diem=25.0,
        positions=(
            PositionSnapshot("b", PositionType.LEIHE, name="Dolly", costs=300, actual_costs=280, sort_order=1),
            PositionSnapshot("a", PositionType.CREW, name="Regie", daily_rate=500, sort_order=2),
            PositionSnapshot("c", PositionType.SONSTIGES, name="Catering", costs=90, active=False, sort_order=3),
        ),
    )

    path = BudgetExporter().export(project, tmp_path / "out" / "budget.csv")

    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "Projekt;Imagefilm"
    assert lines[3] == "Leihe;Dolly;ja;300,00;300,00;280,00;20,00"
    assert lines[4] == "Crew;Regie;ja;1.030,00;1.000,00;0,00;1.000,00"
    assert lines[5] == "Sonstiges;Catering;nein;0,00;;;"
    assert lines[6] == "Verpflegung;;;;30,00;25,00;5,00"
    assert "Gesamt;1.330,00" in lines
    assert "Hotelnächte;0" in lines
    assert "Realkosten;305,00" in lines
