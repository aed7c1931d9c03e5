"""PDF rendering of scan reports.

Layout and drawing are separate: ``layout_report`` places every line on a page
(y measured downward from the top edge, in points) and ``render_report`` draws
those pages with reportlab. Keeping layout pure makes pagination testable
without parsing PDF output.
"""
import io
import logging
import re
from dataclasses import dataclass, field
from typing import List, Tuple

from reportlab.lib.pagesizes import A4
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from securescan.core.errors import RenderFailure
from securescan.models.schemas import ExtendedReport, Finding, Report

logger = logging.getLogger(__name__)

PAGE_WIDTH, PAGE_HEIGHT = A4
MARGIN = 56.0
CONTENT_WIDTH = PAGE_WIDTH - 2 * MARGIN
HEADER_HEIGHT = 113.0
PAGE_TOP = 56.0
PAGE_BOTTOM = 737.0
FOOTER_TOP = PAGE_HEIGHT - 42.0
BLOCK_GAP = 14.0

TITLE = "SecureScan Audit Report"
DISCLAIMER = (
    "Disclaimer: This tool performs passive security checks only and does not exploit "
    "vulnerabilities. It provides a baseline assessment and should not be considered a "
    "comprehensive security audit."
)

BLACK = (0.0, 0.0, 0.0)
WHITE = (1.0, 1.0, 1.0)
GREY = (0.59, 0.59, 0.59)
BLUE = (0.23, 0.51, 0.96)
GREEN = (0.13, 0.55, 0.13)
RED = (0.8, 0.1, 0.1)

# ZapfDingbats code points: check mark / ballot x
PASS_GLYPH = "3"
FAIL_GLYPH = "7"


@dataclass(frozen=True)
class Line:
    y: float
    text: str
    font: str = "Helvetica"
    size: float = 10.0
    x: float = MARGIN
    color: Tuple[float, float, float] = BLACK
    role: str = "body"  # header / summary / finding / footer


@dataclass
class Page:
    lines: List[Line] = field(default_factory=list)
    rules: List[float] = field(default_factory=list)
    header_band: bool = False


@dataclass(frozen=True)
class RenderedDocument:
    content: bytes
    filename: str
    media_type: str = "application/pdf"


# one row of a finding block: (leading, [(x, text, font, size, color)])
_Row = Tuple[float, List[Tuple[float, str, str, float, Tuple[float, float, float]]]]


def report_filename(url: str) -> str:
    return "SecureScan_Report_" + re.sub(r"[^A-Za-z0-9]", "_", url) + ".pdf"


def _wrap(text: str, font: str, size: float, width: float) -> List[str]:
    """Word-wrap to ``width``; a run with no spaces (URLs) is broken per character."""
    if not text:
        return []
    lines = []
    for line in simpleSplit(text, font, size, width):
        while stringWidth(line, font, size) > width:
            cut = 1
            while cut < len(line) and stringWidth(line[:cut + 1], font, size) <= width:
                cut += 1
            lines.append(line[:cut])
            line = line[cut:]
        if line:
            lines.append(line)
    return lines


def _finding_rows(finding: Finding, report: Report) -> List[_Row]:
    passed = finding.status == "Pass"
    rows: List[_Row] = [(18.0, [
        (MARGIN, PASS_GLYPH if passed else FAIL_GLYPH, "ZapfDingbats", 11, GREEN if passed else RED),
        (MARGIN + 16, f"{finding.title} ({finding.impact})", "Helvetica-Bold", 12, BLACK),
    ])]
    for text in _wrap(finding.description, "Helvetica", 10, CONTENT_WIDTH - 16):
        rows.append((13.0, [(MARGIN + 16, text, "Helvetica", 10, BLACK)]))

    if isinstance(report, ExtendedReport):
        rec = report.recommendation_for(finding.id)
        if rec is not None:
            rows.append((16.0, [(MARGIN + 16, "How to Fix:", "Helvetica-Oblique", 10, BLACK)]))
            for step in rec.steps:
                wrapped = _wrap(step, "Helvetica", 10, CONTENT_WIDTH - 40)
                for i, text in enumerate(wrapped):
                    x = MARGIN + 28 if i == 0 else MARGIN + 36
                    rows.append((13.0, [(x, f"• {text}" if i == 0 else text, "Helvetica", 10, BLACK)]))
            if rec.remediation_link:
                for text in _wrap(f"Learn more: {rec.remediation_link}", "Helvetica", 9, CONTENT_WIDTH - 28):
                    rows.append((13.0, [(MARGIN + 28, text, "Helvetica", 9, BLUE)]))
    return rows


def layout_report(report: Report) -> List[Page]:
    if not isinstance(report, Report):
        raise RenderFailure(f"Cannot render {type(report).__name__}; expected a scan report")

    first = Page(header_band=True)
    first.lines.append(Line(70, TITLE, "Helvetica-Bold", 24, color=WHITE, role="header"))

    stamp = report.timestamp.strftime("%Y-%m-%d %H:%M:%S %Z").strip()
    y = 156.0
    for text in (
        *_wrap(f"Target URL: {report.url}", "Helvetica", 14, CONTENT_WIDTH),
        f"Security Score: {report.score}/100",
        f"Risk Level: {report.risk_level.value}",
        f"Date Scanned: {stamp}",
    ):
        first.lines.append(Line(y, text, "Helvetica", 14, role="summary"))
        y += 28
    first.rules.append(y - 8)
    y += 36
    first.lines.append(Line(y, "Detected Issues", "Helvetica-Bold", 18, role="summary"))
    cursor = y + 14

    pages = [first]
    page = first
    for finding in report.findings:
        rows = _finding_rows(finding, report)
        height = sum(leading for leading, _ in rows)
        if cursor + height > PAGE_BOTTOM and cursor > PAGE_TOP:
            page = Page()
            pages.append(page)
            cursor = PAGE_TOP
        for leading, items in rows:
            # blocks taller than a page flow onto the next one
            if cursor + leading > PAGE_BOTTOM:
                page = Page()
                pages.append(page)
                cursor = PAGE_TOP
            cursor += leading
            for x, text, font, size, color in items:
                page.lines.append(Line(cursor, text, font, size, x=x, color=color, role="finding"))
        cursor += BLOCK_GAP

    footer_y = FOOTER_TOP
    for text in _wrap(DISCLAIMER, "Helvetica", 8, CONTENT_WIDTH):
        pages[-1].lines.append(Line(footer_y, text, "Helvetica", 8, color=GREY, role="footer"))
        footer_y += 10
    return pages


def render_report(report: Report) -> RenderedDocument:
    """Render a base or extended report to PDF bytes plus a suggested filename."""
    pages = layout_report(report)
    buf = io.BytesIO()
    try:
        pdf = canvas.Canvas(buf, pagesize=A4)
        pdf.setTitle(TITLE)
        for page in pages:
            if page.header_band:
                pdf.setFillColorRGB(*BLUE)
                pdf.rect(0, PAGE_HEIGHT - HEADER_HEIGHT, PAGE_WIDTH, HEADER_HEIGHT, fill=1, stroke=0)
            pdf.setStrokeColorRGB(0.78, 0.78, 0.78)
            for rule_y in page.rules:
                pdf.line(MARGIN, PAGE_HEIGHT - rule_y, PAGE_WIDTH - MARGIN, PAGE_HEIGHT - rule_y)
            for line in page.lines:
                pdf.setFont(line.font, line.size)
                pdf.setFillColorRGB(*line.color)
                pdf.drawString(line.x, PAGE_HEIGHT - line.y, line.text)
            pdf.showPage()
        pdf.save()
    except Exception as e:
        raise RenderFailure(f"PDF rendering failed: {e}") from e

    logger.info("rendered report for %s: %d page(s)", report.url, len(pages))
    return RenderedDocument(content=buf.getvalue(), filename=report_filename(report.url))