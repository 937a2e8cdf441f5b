# surveyforge/report_sections/_docx.py
from __future__ import annotations

from typing import Any, List, Optional, Union

from docx.document import Document
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.shared import Inches, Pt, RGBColor
from docx.text.paragraph import Paragraph


class ReportStyle:
    font: str = "Calibri"
    title_size: int = 20
    h1_size: int = 14
    body_size: int = 11
    small_size: int = 9

    title_blue: RGBColor = RGBColor(0, 112, 192)
    muted: RGBColor = RGBColor(89, 89, 89)
    accent_hex: str = "ED7D31"

    header_fill_hex: str = "D9E2F3"
    border_hex: str = "A6A6A6"


STYLE = ReportStyle()


def s(v: Any) -> str:
    return "" if v is None else str(v).strip()


def na(v: Any) -> str:
    sv = s(v)
    return sv if sv else "N/A"


# ============================================================
# Paragraph / run helpers
# ============================================================
def tight_paragraph(
    p: Paragraph,
    *,
    align=WD_ALIGN_PARAGRAPH.LEFT,
    before_pt: float = 0,
    after_pt: float = 0,
    line_spacing: float = 1.0,
) -> None:
    p.alignment = align
    pf = p.paragraph_format
    pf.space_before = Pt(float(before_pt))
    pf.space_after = Pt(float(after_pt))
    pf.line_spacing = float(line_spacing)


def set_run(run, font: str, size: Union[int, float], bold: bool = False, color: Optional[RGBColor] = None,
            italic: bool = False) -> None:
    run.font.name = font
    # eastAsia font keeps non-Latin scripts on the same face
    rpr = run._element.get_or_add_rPr()
    rfonts = rpr.find(qn("w:rFonts"))
    if rfonts is None:
        rfonts = OxmlElement("w:rFonts")
        rpr.append(rfonts)
    rfonts.set(qn("w:eastAsia"), font)
    run.font.size = Pt(float(size))
    run.bold = bool(bold)
    run.italic = bool(italic)
    if color is not None:
        run.font.color.rgb = color


def _set_paragraph_bottom_border(paragraph: Paragraph, *, color_hex: str, size_eighths: int = 12, space: int = 2) -> None:
    pPr = paragraph._p.get_or_add_pPr()
    pBdr = pPr.find(qn("w:pBdr"))
    if pBdr is None:
        pBdr = OxmlElement("w:pBdr")
        pPr.append(pBdr)

    bottom = pBdr.find(qn("w:bottom"))
    if bottom is None:
        bottom = OxmlElement("w:bottom")
        pBdr.append(bottom)

    bottom.set(qn("w:val"), "single")
    bottom.set(qn("w:sz"), str(int(size_eighths)))
    bottom.set(qn("w:space"), str(int(space)))
    bottom.set(qn("w:color"), s(color_hex).replace("#", ""))


def add_text(doc: Document, text: Any, *, size: Optional[float] = None, bold: bool = False,
             italic: bool = False, color: Optional[RGBColor] = None, after_pt: float = 4,
             align=WD_ALIGN_PARAGRAPH.LEFT) -> Paragraph:
    p = doc.add_paragraph()
    run = p.add_run(s(text))
    set_run(run, STYLE.font, size or STYLE.body_size, bold=bold, color=color, italic=italic)
    tight_paragraph(p, align=align, after_pt=after_pt, line_spacing=1.1)
    return p


def add_section_title_h1(doc: Document, text: str, *, after_pt: float = 6) -> Paragraph:
    p = doc.add_paragraph()
    p.style = "Heading 1"
    run = p.add_run(s(text))
    set_run(run, STYLE.font, STYLE.h1_size, bold=True, color=STYLE.title_blue)
    tight_paragraph(p, before_pt=12, after_pt=float(after_pt))
    _set_paragraph_bottom_border(p, color_hex=STYLE.accent_hex)
    return p


# ============================================================
# Table helpers
# ============================================================
def set_table_borders(table, *, color_hex: str = STYLE.border_hex) -> None:
    color_hex = s(color_hex).replace("#", "") or STYLE.border_hex
    tbl_pr = table._tbl.tblPr
    borders = tbl_pr.first_child_found_in("w:tblBorders")
    if borders is None:
        borders = OxmlElement("w:tblBorders")
        tbl_pr.append(borders)

    for edge in ("top", "left", "bottom", "right", "insideH", "insideV"):
        el = borders.find(qn(f"w:{edge}"))
        if el is None:
            el = OxmlElement(f"w:{edge}")
            borders.append(el)
        el.set(qn("w:val"), "single")
        el.set(qn("w:sz"), "8")
        el.set(qn("w:space"), "0")
        el.set(qn("w:color"), color_hex)


def shade_cell(cell, fill_hex: str) -> None:
    fill_hex = s(fill_hex).replace("#", "") or "FFFFFF"
    tc_pr = cell._tc.get_or_add_tcPr()
    shd = tc_pr.find(qn("w:shd"))
    if shd is None:
        shd = OxmlElement("w:shd")
        tc_pr.append(shd)
    shd.set(qn("w:val"), "clear")
    shd.set(qn("w:color"), "auto")
    shd.set(qn("w:fill"), fill_hex)


def write_cell_text(cell, text: Any, *, size: Optional[int] = None, bold: bool = False,
                    align=WD_ALIGN_PARAGRAPH.LEFT) -> None:
    cell.text = ""
    p = cell.paragraphs[0]
    tight_paragraph(p, align=align)
    r = p.add_run(s(text))
    set_run(r, STYLE.font, size or STYLE.body_size, bold=bold)


def set_column_widths(table, widths_in: List[float]) -> None:
    for row in table.rows:
        for i, w in enumerate(widths_in):
            if i < len(row.cells):
                row.cells[i].width = Inches(float(w))
