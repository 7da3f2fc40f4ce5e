"""Typed view of the row tree in a Xero report response.

Xero reports arrive as nested ``Rows`` lists where each entry carries a
``RowType`` of ``Header``, ``Section``, ``Row`` or ``SummaryRow``. Sections
nest further rows. This module parses that tree into small frozen
dataclasses and offers a recursive walk over it.
"""
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple, Union


@dataclass(frozen=True)
class Header:
    cells: Tuple[str, ...]


@dataclass(frozen=True)
class Row:
    cells: Tuple[str, ...]

    @property
    def label(self) -> str:
        return self.cells[0] if self.cells else ""

    @property
    def value(self) -> str:
        return self.cells[1] if len(self.cells) > 1 else ""


@dataclass(frozen=True)
class SummaryRow(Row):
    pass


@dataclass(frozen=True)
class Section:
    title: str
    rows: Tuple["ReportNode", ...]


ReportNode = Union[Header, Section, Row, SummaryRow]


@dataclass(frozen=True)
class Report:
    rows: Tuple[ReportNode, ...]

    @property
    def month_label(self) -> str:
        """Column heading of the first value column, e.g. ``31 Mar 2024``."""
        for node in self.rows:
            if isinstance(node, Header) and len(node.cells) > 1:
                return node.cells[1]
        return ""

    @property
    def sections(self) -> List[Section]:
        return [node for node in self.rows if isinstance(node, Section)]

    def has_nonzero(self, *labels: str) -> bool:
        """True when an untitled section holds a plain row for any label with a nonzero value."""
        for section in self.sections:
            if section.title:
                continue
            for node in section.rows:
                if type(node) is Row and node.label in labels and _nonzero(node.value):
                    return True
        return False


def _nonzero(value: str) -> bool:
    try:
        return float(value) != 0.0
    except (TypeError, ValueError):
        return False


def _cells(raw: dict) -> Tuple[str, ...]:
    return tuple(
        "" if cell.get("Value") is None else str(cell.get("Value"))
        for cell in raw.get("Cells") or []
    )


def parse_row(raw: dict) -> Optional[ReportNode]:
    row_type = raw.get("RowType")
    if row_type == "Header":
        return Header(_cells(raw))
    if row_type == "Section":
        children = (parse_row(child) for child in raw.get("Rows") or [])
        return Section(raw.get("Title") or "", tuple(c for c in children if c is not None))
    if row_type == "SummaryRow":
        return SummaryRow(_cells(raw))
    if row_type == "Row":
        return Row(_cells(raw))
    return None


def parse_reports(body: dict) -> List[Report]:
    """Parse the ``Reports`` list of a report endpoint response."""
    reports = []
    for raw in body.get("Reports") or []:
        nodes = (parse_row(row) for row in raw.get("Rows") or [])
        reports.append(Report(tuple(n for n in nodes if n is not None)))
    return reports


def walk(nodes, section: Optional[Section] = None) -> Iterator[Tuple[Optional[Section], ReportNode]]:
    """Yield every node depth-first, paired with its enclosing section."""
    for node in nodes:
        yield section, node
        if isinstance(node, Section):
            yield from walk(node.rows, node)
