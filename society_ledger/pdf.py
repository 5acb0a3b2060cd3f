"""Print-ready credit receipts rendered with ReportLab."""

from __future__ import annotations

from pathlib import Path
from xml.sax.saxutils import escape

from .config import SocietyConfig
from .currency import format_inr
from .models import ReceiptRecord

# Fonts with Gujarati coverage, by platform. ReportLab needs TrueType outlines.
_FONT_SEARCH_PATHS = [
    # Noto (Debian/Ubuntu: fonts-noto-core)
    "/usr/share/fonts/truetype/noto/NotoSansGujarati-Regular.ttf",
    "/usr/share/fonts/truetype/noto/NotoSerifGujarati-Regular.ttf",
    # Noto (Fedora/RHEL)
    "/usr/share/fonts/google-noto/NotoSansGujarati-Regular.ttf",
    "/usr/share/fonts/google-noto-vf/NotoSansGujarati[wght].ttf",
    # Lohit
    "/usr/share/fonts/truetype/lohit-gujarati/Lohit-Gujarati.ttf",
    "/usr/share/fonts/lohit-gujarati/Lohit-Gujarati.ttf",
    # macOS
    "/Library/Fonts/Arial Unicode.ttf",
    "/System/Library/Fonts/Supplemental/Arial Unicode.ttf",
]

_RED = "#B32D2E"


def _find_gujarati_font() -> str:
    """Find a Gujarati-capable font on the system."""
    for path in _FONT_SEARCH_PATHS:
        if Path(path).exists():
            return path
    raise FileNotFoundError(
        "No Gujarati font found. Install one of:\n"
        "  Ubuntu/Debian: sudo apt install fonts-noto-core\n"
        "  Fedora/RHEL:   sudo dnf install google-noto-sans-gujarati-fonts\n"
        "  Any platform:  Lohit Gujarati"
    )


def _register_gujarati_font() -> str:
    """Register a Gujarati font with ReportLab and return the font name."""
    from reportlab.pdfbase import pdfmetrics
    from reportlab.pdfbase.ttfonts import TTFont

    font_name = "GujaratiFont"
    pdfmetrics.registerFont(TTFont(font_name, _find_gujarati_font()))
    # Single face only; <b>/<i> markup falls back to the regular face.
    pdfmetrics.registerFontFamily(
        font_name,
        normal=font_name,
        bold=font_name,
        italic=font_name,
        boldItalic=font_name,
    )
    return font_name


def generate_receipt_pdf(
    record: ReceiptRecord,
    output_path: str | Path,
    society: SocietyConfig | None = None,
) -> Path:
    """Render one receipt as an A4 PDF.

    Args:
        record: The saved receipt to render.
        output_path: Where to save the PDF file.
        society: Letterhead details. Defaults to ``SocietyConfig()``.

    Returns:
        Path to the generated PDF file.

    Raises:
        ImportError: If reportlab is not installed.
        FileNotFoundError: If no Gujarati font is found.
    """
    try:
        from reportlab.lib import colors
        from reportlab.lib.enums import TA_CENTER, TA_RIGHT
        from reportlab.lib.pagesizes import A4
        from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
        from reportlab.lib.units import mm
        from reportlab.platypus import (
            Paragraph,
            SimpleDocTemplate,
            Spacer,
            Table,
            TableStyle,
        )
    except ImportError:
        raise ImportError(
            "reportlab is required for PDF receipts: "
            "pip install 'society-ledger[pdf]'"
        )

    society = society or SocietyConfig()
    font_name = _register_gujarati_font()
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    doc = SimpleDocTemplate(
        str(output_path),
        pagesize=A4,
        leftMargin=15 * mm,
        rightMargin=15 * mm,
        topMargin=15 * mm,
        bottomMargin=15 * mm,
        title=f"Receipt {record.receipt_no}",
    )

    red = colors.HexColor(_RED)
    styles = getSampleStyleSheet()
    badge_style = ParagraphStyle(
        "Badge", parent=styles["Normal"], fontName=font_name,
        fontSize=11, leading=15, alignment=TA_CENTER, textColor=red,
    )
    title_style = ParagraphStyle(
        "Society", parent=styles["Title"], fontName=font_name,
        fontSize=20, leading=26, textColor=red,
    )
    subtitle_style = ParagraphStyle(
        "SocietySub", parent=styles["Normal"], fontName=font_name,
        fontSize=13, leading=17, alignment=TA_CENTER, textColor=red,
    )
    address_style = ParagraphStyle(
        "Address", parent=styles["Normal"], fontName=font_name,
        fontSize=8, leading=11, alignment=TA_CENTER, textColor=colors.grey,
    )
    body_style = ParagraphStyle(
        "Body", parent=styles["Normal"], fontName=font_name,
        fontSize=11, leading=16,
    )
    words_style = ParagraphStyle(
        "Words", parent=body_style, fontSize=11, leading=15,
        backColor=colors.HexColor("#F8FAFC"), borderPadding=4,
    )
    sign_style = ParagraphStyle(
        "Sign", parent=body_style, alignment=TA_RIGHT, textColor=red,
    )

    elements: list = []

    elements.append(Paragraph("જમા પાવતી (Credit Receipt)", badge_style))
    elements.append(Spacer(1, 3 * mm))
    elements.append(Paragraph(escape(society.name), title_style))
    elements.append(Paragraph(escape(society.subtitle), subtitle_style))
    elements.append(Paragraph(escape(society.address), address_style))
    elements.append(Spacer(1, 5 * mm))

    meta = Table(
        [[
            f"પહોંચ નં (Receipt No): {record.receipt_no}",
            f"તારીખ (Date): {record.date}",
            f"{society.section}\nબ્લોક/ઘર નં (Block/House No): {record.house_no}",
        ]],
        colWidths=[55 * mm, 55 * mm, 70 * mm],
    )
    meta.setStyle(TableStyle([
        ("FONTNAME", (0, 0), (-1, -1), font_name),
        ("FONTSIZE", (0, 0), (-1, -1), 10),
        ("TEXTCOLOR", (0, 0), (-1, -1), red),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("BOX", (2, 0), (2, 0), 1.5, red),
        ("ALIGN", (2, 0), (2, 0), "CENTER"),
        ("LINEBELOW", (0, 0), (1, 0), 0.5, colors.lightgrey),
    ]))
    elements.append(meta)
    elements.append(Spacer(1, 6 * mm))

    elements.append(
        Paragraph(f"શ્રી/શ્રીમતી (Mr/Ms), <b>{escape(record.customer_name)}</b>", body_style)
    )
    payer = escape(record.payer_name) or "-"
    elements.append(
        Paragraph(f"હસ્તે (Through), {payer} તરફથી મળ્યા છે.", body_style)
    )
    elements.append(Spacer(1, 5 * mm))

    table_data = [["ક્રમ", "વિગત (Particulars)", "રકમ રૂ. (Amount ₹)"]]
    for i, item in enumerate(record.items, 1):
        amount = format_inr(item.amount) if item.amount else ""
        table_data.append([str(i), item.label, amount])
    table_data.append(["", "કુલ (Total)", f"₹{format_inr(record.total_amount)}"])

    items_table = Table(table_data, colWidths=[15 * mm, 115 * mm, 50 * mm])
    items_table.setStyle(TableStyle([
        ("FONTNAME", (0, 0), (-1, -1), font_name),
        ("FONTSIZE", (0, 0), (-1, -1), 10),
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#FFF5F5")),
        ("TEXTCOLOR", (0, 0), (-1, 0), red),
        ("TEXTCOLOR", (1, 1), (1, -1), red),
        ("GRID", (0, 0), (-1, -1), 0.8, red),
        ("BOX", (0, 0), (-1, -1), 2, red),
        ("ALIGN", (0, 0), (0, -1), "CENTER"),
        ("ALIGN", (2, 0), (2, -1), "RIGHT"),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("FONTSIZE", (0, -1), (-1, -1), 13),
        ("ALIGN", (1, -1), (1, -1), "RIGHT"),
        ("TOPPADDING", (0, 0), (-1, -1), 6),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
    ]))
    elements.append(items_table)
    elements.append(Spacer(1, 6 * mm))

    elements.append(
        Paragraph(f"અંકે રૂપિયા (In Words): <i>{escape(record.currency_words)}</i>", words_style)
    )
    elements.append(Spacer(1, 12 * mm))

    cheque_date = record.cheque.date if record.cheque else ""
    cheque_bank = record.cheque.bank if record.cheque else ""
    cheque = Table(
        [
            ["ચેકની વિગત (Cheque Details):"],
            [f"તારીખ (Date): {cheque_date or '_' * 20}"],
            [f"બેંક (Bank): {cheque_bank or '_' * 22}"],
        ],
        colWidths=[85 * mm],
    )
    cheque.setStyle(TableStyle([
        ("FONTNAME", (0, 0), (-1, -1), font_name),
        ("FONTSIZE", (0, 0), (-1, -1), 9),
        ("TEXTCOLOR", (0, 0), (-1, -1), red),
        ("BOX", (0, 0), (-1, -1), 1.5, red),
        ("LINEBELOW", (0, 0), (0, 0), 0.5, colors.lightgrey),
    ]))
    elements.append(cheque)
    elements.append(Spacer(1, 10 * mm))

    elements.append(Paragraph("નાણાં લેનારની સહી", sign_style))
    elements.append(Paragraph("(Authorized Signatory)", sign_style))

    doc.build(elements)
    return output_path
