"""
Invoice PDF Generator
Renders a single-page invoice: company header, bill-to block, line items and total.
Invoices with more lines than fit on the page list the first ones and fold the
rest into one "more items" row; the total always covers every item.
"""

import io
import logging
from datetime import datetime
from typing import Optional
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import HRFlowable, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from .. import config
from ..models import Invoice

logger = logging.getLogger(__name__)

PAYMENT_TERMS = "Please make payment within 14 days of invoice date."
FOOTER_TEXT = "Thank you for your business!"
MAX_ITEM_ROWS = 10
MAX_DESCRIPTION_LENGTH = 55


def format_currency(amount: Optional[float], currency: Optional[str] = None) -> str:
    """NGN 1,234.56 style amounts"""
    return f"{currency or config.INVOICE_CURRENCY} {amount or 0:,.2f}"


def format_date(value: Optional[datetime]) -> str:
    if not value:
        return ""
    return value.strftime("%d %b %Y")


def display_invoice_number(invoice_id) -> str:
    """INV followed by the last six characters of the id, zero padded"""
    return f"INV{str(invoice_id)[-6:].rjust(6, '0')}"


def item_rows(items, limit: int = MAX_ITEM_ROWS) -> list[tuple[str, float]]:
    """(description, amount) rows for the items table, at most `limit` of them"""
    rows = []
    for item in items:
        description = item.description or (item.job.title if item.job else "")
        if len(description) > MAX_DESCRIPTION_LENGTH:
            description = description[: MAX_DESCRIPTION_LENGTH - 3].rstrip() + "..."
        rows.append((description, item.amount or 0))

    if len(rows) <= limit:
        return rows
    rest = rows[limit - 1 :]
    folded = (f"+ {len(rest)} more items", sum(amount for _, amount in rest))
    return rows[: limit - 1] + [folded]


class InvoicePDFGenerator:
    """Generate a printable invoice PDF"""

    def __init__(self, invoice: Invoice):
        self.invoice = invoice
        self.client = invoice.client
        self.display_number = display_invoice_number(invoice.id)
        self.page_count = 0

        self.page_width, self.page_height = A4
        self.margin = 20 * mm
        self.content_width = self.page_width - (2 * self.margin)

        self.dark_gray = colors.HexColor("#1f2937")
        self.muted_gray = colors.HexColor("#808080")
        self.rule_gray = colors.HexColor("#dcdcdc")
        self.header_fill = colors.HexColor("#f7f8fa")
        self.stripe_fill = colors.HexColor("#fcfcfc")

    def _draw_footer(self, canvas, _doc):
        canvas.saveState()
        canvas.setFont("Helvetica", 8)
        canvas.setFillColor(self.muted_gray)
        canvas.drawCentredString(self.page_width / 2, 20 * mm, FOOTER_TEXT)
        canvas.restoreState()

    def generate(self) -> bytes:
        """Generate PDF and return bytes"""
        logger.info(f"📄 Generating invoice PDF for invoice {self.invoice.id}")

        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=self.margin,
            leftMargin=self.margin,
            topMargin=self.margin,
            bottomMargin=self.margin,
            title=f"Invoice {self.display_number}",
        )

        styles = getSampleStyleSheet()
        company_style = ParagraphStyle(
            "Company", parent=styles["Heading1"], fontSize=24, textColor=self.dark_gray
        )
        title_style = ParagraphStyle(
            "InvoiceTitle",
            parent=styles["Heading1"],
            fontSize=20,
            textColor=self.dark_gray,
            alignment=TA_RIGHT,
        )
        body_style = ParagraphStyle(
            "Body", parent=styles["Normal"], fontSize=10, leading=14, textColor=self.dark_gray
        )
        body_right = ParagraphStyle("BodyRight", parent=body_style, alignment=TA_RIGHT)
        heading_style = ParagraphStyle(
            "Heading", parent=body_style, fontName="Helvetica-Bold", fontSize=12, spaceAfter=6
        )

        story = []

        # Company header (left) and invoice details (right)
        company_block = [
            Paragraph(escape(config.COMPANY_NAME), company_style),
            Paragraph(
                "<br/>".join(
                    escape(line)
                    for line in (config.COMPANY_ADDRESS, config.COMPANY_EMAIL, config.COMPANY_PHONE)
                ),
                body_style,
            ),
        ]
        details_block = [
            Paragraph("INVOICE", title_style),
            Paragraph(
                "<br/>".join(
                    [
                        f"Invoice No: {self.display_number}",
                        f"Date: {format_date(self.invoice.created_at)}",
                        f"Due Date: {format_date(self.invoice.due_date)}",
                        f"Status: {escape((self.invoice.status or '').upper())}",
                    ]
                ),
                body_right,
            ),
        ]
        header = Table(
            [[company_block, details_block]],
            colWidths=[self.content_width * 0.55, self.content_width * 0.45],
        )
        header.setStyle(TableStyle([("VALIGN", (0, 0), (-1, -1), "TOP")]))
        story.append(header)
        story.append(Spacer(1, 6 * mm))
        story.append(HRFlowable(width="100%", thickness=0.5, color=self.rule_gray))
        story.append(Spacer(1, 6 * mm))

        # Bill to
        story.append(Paragraph("BILL TO", heading_style))
        bill_to = [
            self.client.name if self.client else "Unknown Client",
            (self.client.address if self.client else None) or "",
            (self.client.email if self.client else None) or "",
        ]
        story.append(Paragraph("<br/>".join(escape(line) for line in bill_to), body_style))
        story.append(Spacer(1, 10 * mm))

        # Line items
        rows = [["Description", "Amount"]]
        total = sum(item.amount or 0 for item in self.invoice.items)
        for description, amount in item_rows(self.invoice.items):
            rows.append([Paragraph(escape(description), body_style), format_currency(amount)])
        rows.append(["Total", format_currency(total)])

        items_table = Table(rows, colWidths=[self.content_width * 0.65, self.content_width * 0.35])
        table_style = [
            ("FONT", (0, 0), (-1, 0), "Helvetica-Bold", 10),
            ("FONT", (0, 1), (-1, -1), "Helvetica", 10),
            ("FONT", (0, -1), (-1, -1), "Helvetica-Bold", 10),
            ("BACKGROUND", (0, 0), (-1, 0), self.header_fill),
            ("ALIGN", (1, 0), (1, -1), "RIGHT"),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ("TEXTCOLOR", (0, 0), (-1, -1), self.dark_gray),
            ("LINEABOVE", (0, -1), (-1, -1), 0.5, self.rule_gray),
            ("TOPPADDING", (0, 0), (-1, -1), 6),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
        ]
        # Subtle alternating background on item rows
        for index in range(1, len(rows) - 1):
            if index % 2 == 1:
                table_style.append(("BACKGROUND", (0, index), (-1, index), self.stripe_fill))
        items_table.setStyle(TableStyle(table_style))
        story.append(items_table)
        story.append(Spacer(1, 12 * mm))

        # Payment terms
        story.append(Paragraph("Payment Terms", heading_style))
        story.append(Paragraph(PAYMENT_TERMS, body_style))

        doc.build(story, onFirstPage=self._draw_footer, onLaterPages=self._draw_footer)
        self.page_count = doc.page

        pdf_bytes = buffer.getvalue()
        buffer.close()
        logger.info(f"✅ Invoice PDF generated: {len(pdf_bytes)} bytes")
        return pdf_bytes
