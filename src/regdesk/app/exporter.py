from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import TYPE_CHECKING, TypeVar
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import PageBreak, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from regdesk.app.errors import ExportPreconditionError
from regdesk.app.record_models import VoterRecord, option_display, parse_iso_date, parse_iso_datetime

if TYPE_CHECKING:
    from regdesk.app.state_containers import RecordSession


LAYOUT_TABLE = "table"
LAYOUT_CARDS = "cards"

TABLE_ROWS_PER_PAGE = 25
CARDS_PER_PAGE = 14
CARD_COLUMNS = 2
CARD_ROWS = CARDS_PER_PAGE // CARD_COLUMNS

EMPTY_CELL = "-"

EXPORT_FIELDS: tuple[tuple[str, str], ...] = (
    ("name", "Name"),
    ("nic", "NIC"),
    ("dob", "Date of Birth"),
    ("politicalPartyId", "Party ID"),
    ("priority", "Priority"),
    ("RegID", "Reg ID"),
    ("mobile1", "Mobile 1"),
    ("mobile2", "Mobile 2"),
    ("whatsapp", "WhatsApp"),
    ("homeNumber", "Home Number"),
    ("address", "Address"),
    ("region", "Region"),
    ("agaDivision", "AGA Division"),
    ("gsDivision", "GS Division"),
    ("poolingBooth", "Pooling Booth"),
    ("communities", "Communities"),
    ("connectivity", "Connectivity"),
    ("createdAt", "Created At"),
    ("updatedAt", "Updated At"),
)
DEFAULT_EXPORT_FIELDS: tuple[str, ...] = ("name", "nic", "politicalPartyId", "mobile1")

NO_ROWS_MESSAGE = "No records to export. Please ensure there are filtered records in the table."
NO_FIELDS_MESSAGE = "Please select at least one field to export."

_FIELD_LABELS = dict(EXPORT_FIELDS)
_TEXT_ATTRIBUTES = {
    "name": "name",
    "nic": "nic",
    "politicalPartyId": "political_party_id",
    "priority": "priority",
    "RegID": "reg_id",
    "mobile1": "mobile1",
    "mobile2": "mobile2",
    "whatsapp": "whatsapp",
    "homeNumber": "home_number",
    "address": "address",
    "connectivity": "connectivity",
}
_LOCATION_ATTRIBUTES = {
    "region": "region",
    "agaDivision": "aga_division",
    "gsDivision": "gs_division",
    "poolingBooth": "pooling_booth",
}

_HEADER_COLOR = colors.HexColor("#4285f4")
_STRIPE_COLOR = colors.HexColor("#f8f9fa")
_GRID_COLOR = colors.HexColor("#dddddd")
_CARD_COLOR = colors.HexColor("#f5f9ff")
_CARD_BORDER = colors.HexColor("#d0d0d0")
_PLACEHOLDER_COLOR = colors.HexColor("#f0f3f8")
_PLACEHOLDER_BORDER = colors.HexColor("#e4e4e4")
_MUTED_TEXT = colors.HexColor("#666666")

_log = logging.getLogger("regdesk.export")

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class ExportRequest:
    """Everything a renderer needs, captured when the export was requested."""

    fields: tuple[str, ...]
    records: tuple[VoterRecord, ...]
    layout: str = LAYOUT_TABLE
    generated_at: datetime = field(default_factory=datetime.now)

    @property
    def page_size(self) -> int:
        return CARDS_PER_PAGE if self.layout == LAYOUT_CARDS else TABLE_ROWS_PER_PAGE

    @property
    def headers(self) -> list[str]:
        return [field_label(key) for key in self.fields]

    def page_count(self) -> int:
        return len(chunk_pages(self.records, self.page_size))


def field_label(key: str) -> str:
    return _FIELD_LABELS.get(key, key)


def select_fields(keys: Iterable[str]) -> tuple[str, ...]:
    """Known export keys from ``keys``, in column order."""
    wanted = {str(key) for key in keys}
    return tuple(key for key, _label in EXPORT_FIELDS if key in wanted)


def build_export_request(
    session_or_records: "RecordSession | Iterable[VoterRecord]",
    fields: Iterable[str] = DEFAULT_EXPORT_FIELDS,
    layout: str = LAYOUT_TABLE,
) -> ExportRequest:
    """Snapshot the filtered records for export.

    Exports cover every record matching the current filters, not just the
    visible page. Raises ``ExportPreconditionError`` when there is nothing to
    export or, for the table layout, no column was chosen.
    """
    if layout not in (LAYOUT_TABLE, LAYOUT_CARDS):
        raise ValueError(f"Unknown export layout: {layout!r}")
    filtered = getattr(session_or_records, "filtered", None)
    records = tuple(filtered() if callable(filtered) else session_or_records)
    if not records:
        raise ExportPreconditionError(NO_ROWS_MESSAGE)
    selected = select_fields(fields)
    if layout == LAYOUT_TABLE and not selected:
        raise ExportPreconditionError(NO_FIELDS_MESSAGE)
    return ExportRequest(fields=selected, records=records, layout=layout)


def _format_date(value: str) -> str:
    parsed = parse_iso_date(value)
    return parsed.isoformat() if parsed is not None else EMPTY_CELL


def _format_timestamp(value: str) -> str:
    parsed = parse_iso_datetime(value)
    if parsed is None:
        return EMPTY_CELL
    return parsed.astimezone().date().isoformat()


def export_cell(record: VoterRecord, key: str) -> str:
    if key in _LOCATION_ATTRIBUTES:
        text = option_display(getattr(record, _LOCATION_ATTRIBUTES[key]))
    elif key == "communities":
        text = ", ".join(record.communities)
    elif key == "dob":
        return _format_date(record.dob) if record.dob else EMPTY_CELL
    elif key == "createdAt":
        return _format_timestamp(record.created_at)
    elif key == "updatedAt":
        return _format_timestamp(record.updated_at)
    elif key in _TEXT_ATTRIBUTES:
        text = getattr(record, _TEXT_ATTRIBUTES[key])
    else:
        text = str(record.extra.get(key, "") or "")
    return text or EMPTY_CELL


def export_rows(request: ExportRequest) -> list[list[str]]:
    return [[export_cell(record, key) for key in request.fields] for record in request.records]


def chunk_pages(rows: Sequence[T], page_size: int) -> list[list[T]]:
    if page_size <= 0:
        raise ValueError("page_size must be positive")
    return [list(rows[start : start + page_size]) for start in range(0, len(rows), page_size)]


def default_export_file_name(layout: str, today: date | None = None) -> str:
    stamp = (today or date.today()).isoformat()
    if layout == LAYOUT_CARDS:
        return f"address_list_{stamp}.pdf"
    return f"user_records_{stamp}.pdf"


def _styles() -> dict[str, ParagraphStyle]:
    sheet = getSampleStyleSheet()
    return {
        "title": ParagraphStyle(
            "ExportTitle",
            parent=sheet["Heading2"],
            fontSize=18,
            textColor=colors.HexColor("#333333"),
            spaceAfter=6,
        ),
        "meta": ParagraphStyle("ExportMeta", parent=sheet["Normal"], fontSize=9, textColor=_MUTED_TEXT),
        "header": ParagraphStyle(
            "ExportHeader",
            parent=sheet["Normal"],
            fontName="Helvetica-Bold",
            fontSize=8,
            leading=10,
            textColor=colors.white,
        ),
        "cell": ParagraphStyle("ExportCell", parent=sheet["Normal"], fontSize=8, leading=10),
        "badge": ParagraphStyle(
            "CardBadge",
            parent=sheet["Normal"],
            fontSize=8,
            textColor=colors.HexColor("#888888"),
            alignment=TA_RIGHT,
        ),
        "card_name": ParagraphStyle(
            "CardName",
            parent=sheet["Normal"],
            fontName="Helvetica-Bold",
            fontSize=12,
            leading=15,
            spaceAfter=4,
        ),
        "card_address": ParagraphStyle("CardAddress", parent=sheet["Normal"], fontSize=11, leading=14),
    }


def _document(path: Path) -> SimpleDocTemplate:
    path.parent.mkdir(parents=True, exist_ok=True)
    return SimpleDocTemplate(
        str(path),
        pagesize=A4,
        leftMargin=12 * mm,
        rightMargin=12 * mm,
        topMargin=12 * mm,
        bottomMargin=12 * mm,
        title="User Records Export",
    )


def render_records_table_pdf(request: ExportRequest, path: Path | str) -> Path:
    """Write the column export: a title block on page 1, then 25 rows per page."""
    if not request.records:
        raise ExportPreconditionError(NO_ROWS_MESSAGE)
    if not request.fields:
        raise ExportPreconditionError(NO_FIELDS_MESSAGE)
    target = Path(path)
    document = _document(target)
    styles = _styles()
    column_width = document.width / len(request.fields)
    header_row = [Paragraph(escape(label), styles["header"]) for label in request.headers]

    elements: list = [
        Paragraph("User Records Export", styles["title"]),
        Paragraph(f"Generated on: {request.generated_at.strftime('%Y-%m-%d %H:%M:%S')}", styles["meta"]),
        Paragraph(f"Total Records: {len(request.records)}", styles["meta"]),
        Spacer(1, 6 * mm),
    ]
    pages = chunk_pages(export_rows(request), TABLE_ROWS_PER_PAGE)
    for page_index, page_rows in enumerate(pages):
        if page_index > 0:
            elements.append(PageBreak())
        data = [header_row] + [[Paragraph(escape(cell), styles["cell"]) for cell in row] for row in page_rows]
        table = Table(data, colWidths=[column_width] * len(request.fields), repeatRows=1)
        commands = [
            ("BACKGROUND", (0, 0), (-1, 0), _HEADER_COLOR),
            ("GRID", (0, 0), (-1, -1), 0.5, _GRID_COLOR),
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ("TOPPADDING", (0, 0), (-1, -1), 4),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
        ]
        offset = page_index * TABLE_ROWS_PER_PAGE
        for row_index in range(len(page_rows)):
            if (offset + row_index) % 2 == 0:
                commands.append(("BACKGROUND", (0, row_index + 1), (-1, row_index + 1), _STRIPE_COLOR))
        table.setStyle(TableStyle(commands))
        elements.append(table)

    document.build(elements)
    _log.info("Exported %d records to %s", len(request.records), target)
    return target


def _card(record: VoterRecord, number: int, styles: dict[str, ParagraphStyle]) -> list:
    return [
        Paragraph(f"#{number}", styles["badge"]),
        Paragraph(escape(record.name or EMPTY_CELL), styles["card_name"]),
        Paragraph(escape(record.address or EMPTY_CELL).replace("\n", "<br/>"), styles["card_address"]),
    ]


def render_address_cards_pdf(request: ExportRequest, path: Path | str) -> Path:
    """Write address cards, two columns by seven rows per A4 page.

    Cards are numbered across the whole export. Unused slots on the last page
    are drawn as empty placeholders so every page keeps the same grid.
    """
    if not request.records:
        raise ExportPreconditionError(NO_ROWS_MESSAGE)
    target = Path(path)
    document = _document(target)
    styles = _styles()
    column_width = document.width / CARD_COLUMNS
    row_height = (document.height - 10 * mm) / CARD_ROWS

    elements: list = []
    for page_index, page_records in enumerate(chunk_pages(request.records, CARDS_PER_PAGE)):
        if page_index > 0:
            elements.append(PageBreak())
        start = page_index * CARDS_PER_PAGE
        slots: list = [_card(record, start + index + 1, styles) for index, record in enumerate(page_records)]
        placeholders = CARDS_PER_PAGE - len(slots)
        slots.extend("" for _ in range(placeholders))
        data = [slots[row * CARD_COLUMNS : (row + 1) * CARD_COLUMNS] for row in range(CARD_ROWS)]

        commands = [
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ("LEFTPADDING", (0, 0), (-1, -1), 10),
            ("RIGHTPADDING", (0, 0), (-1, -1), 10),
            ("TOPPADDING", (0, 0), (-1, -1), 8),
        ]
        for index in range(CARDS_PER_PAGE):
            cell = (index % CARD_COLUMNS, index // CARD_COLUMNS)
            if index < len(page_records):
                commands.append(("BACKGROUND", cell, cell, _CARD_COLOR))
                commands.append(("BOX", cell, cell, 0.75, _CARD_BORDER))
            else:
                commands.append(("BACKGROUND", cell, cell, _PLACEHOLDER_COLOR))
                commands.append(("BOX", cell, cell, 0.5, _PLACEHOLDER_BORDER, 1, (2, 2)))
        table = Table(
            data,
            colWidths=[column_width] * CARD_COLUMNS,
            rowHeights=[row_height] * CARD_ROWS,
        )
        table.setStyle(TableStyle(commands))
        elements.append(table)

    document.build(elements)
    _log.info("Exported %d address cards to %s", len(request.records), target)
    return target


def render_export(request: ExportRequest, path: Path | str) -> Path:
    if request.layout == LAYOUT_CARDS:
        return render_address_cards_pdf(request, path)
    return render_records_table_pdf(request, path)
