# resumatch/utils/pdf_report.py
from __future__ import annotations
from typing import Iterable, List, Sequence
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import (
    SimpleDocTemplate,
    Paragraph,
    Spacer,
    Table,
    TableStyle,
    ListFlowable,
    ListItem,
)

from resumatch.schemas.analysis import MatchCard, ResumeAnalysis

# ---- Theme ----
COL_TEXT   = colors.HexColor("#111827")
COL_MUTED  = colors.HexColor("#6B7280")
COL_ACCENT = colors.HexColor("#4F46E5")
COL_RULE   = colors.HexColor("#E5E7EB")
STATUS_COLORS = {
    "Strong":   colors.HexColor("#059669"),
    "Improve":  colors.HexColor("#D97706"),
    "Critical": colors.HexColor("#DC2626"),
}

LEFT = RIGHT = 18 * mm
TOP = 22 * mm
BOTTOM = 18 * mm

def _join(items: Iterable[str], empty: str = "None detected") -> str:
    items = [escape(str(s).strip()) for s in (items or []) if str(s).strip()]
    return " • ".join(items) if items else empty

def generate_report_pdf(buf, analysis: ResumeAnalysis, cards: Sequence[MatchCard]) -> None:
    doc = SimpleDocTemplate(
        buf,
        pagesize=A4,
        leftMargin=LEFT,
        rightMargin=RIGHT,
        topMargin=TOP,
        bottomMargin=BOTTOM,
        title="ResuMatch Report",
        author="ResuMatch",
    )

    styles = getSampleStyleSheet()
    Base = ParagraphStyle("BASE", parent=styles["Normal"], fontName="Helvetica",
                          fontSize=10.5, leading=15, textColor=COL_TEXT)

    H1 = ParagraphStyle(
        "H1", parent=Base, fontName="Helvetica-Bold",
        fontSize=18, leading=22, textColor=COL_ACCENT, spaceAfter=4,
    )
    SUB = ParagraphStyle(
        "SUB", parent=Base, fontSize=9.5, leading=12,
        textColor=COL_MUTED, spaceAfter=8,
    )
    SEC = ParagraphStyle(
        "SEC", parent=Base, fontName="Helvetica-Bold",
        fontSize=12.5, leading=16, textColor=COL_ACCENT,
        spaceBefore=10, spaceAfter=4,
    )
    BODY = ParagraphStyle("BODY", parent=Base)
    BODY_MUTED = ParagraphStyle("BODY_MUTED", parent=BODY, textColor=COL_MUTED)
    LABEL = ParagraphStyle("LABEL", parent=Base, fontName="Helvetica-Bold", fontSize=11, leading=14)
    VALUE = ParagraphStyle(
        "VALUE", parent=Base, fontName="Helvetica-Bold",
        fontSize=11, leading=14, textColor=COL_ACCENT, alignment=2,  # right
    )

    story: List = []

    story.append(Paragraph("ResuMatch — Resume Analysis", H1))
    story.append(Paragraph(
        f"{escape(analysis.detected_role or 'Unknown role')} · {escape(analysis.experience_level or 'n/a')}", SUB
    ))
    story.append(_hrule())

    # Score + summary
    story.append(Spacer(0, 8))
    story.append(Paragraph("ATS Score", SEC))
    score = Table([[Paragraph("Overall", LABEL), Paragraph(f"{analysis.ats_score} / 100", VALUE)]],
                  colWidths=[None, 30*mm], hAlign="LEFT")
    score.setStyle(TableStyle([("LINEBELOW", (0,0), (-1,0), 0.4, COL_RULE)]))
    story.append(score)
    story.append(Spacer(0, 6))
    story.append(Paragraph(escape(analysis.summary or ""), BODY))

    story.append(Paragraph("Top Skills", SEC))
    line = _join(analysis.top_skills)
    story.append(Paragraph(line, BODY if analysis.top_skills else BODY_MUTED))

    # Section feedback
    story.append(Paragraph("Section Feedback", SEC))
    rows = []
    sections = (
        ("Skills", analysis.skills_status, analysis.skills_feedback),
        ("Experience", analysis.experience_status, analysis.experience_feedback),
        ("Keywords", analysis.keywords_status, analysis.keywords_feedback),
        ("Formatting", analysis.formatting_status, analysis.formatting_feedback),
    )
    for name, status, feedback in sections:
        tag = ParagraphStyle(f"TAG_{name}", parent=LABEL, textColor=STATUS_COLORS.get(status, COL_MUTED))
        rows.append([Paragraph(name, LABEL), Paragraph(status, tag), Paragraph(escape(feedback or ""), BODY)])
    fb = Table(rows, colWidths=[28*mm, 22*mm, None], hAlign="LEFT")
    fb.setStyle(TableStyle([
        ("VALIGN",        (0,0), (-1,-1), "TOP"),
        ("BOTTOMPADDING", (0,0), (-1,-1), 5),
        ("LINEBELOW",     (0,0), (-1,-2), 0.4, COL_RULE),
    ]))
    story.append(fb)

    # Tips
    story.append(Paragraph("Improvement Tips", SEC))
    tips = [t for t in analysis.improvement_tips if str(t).strip()]
    if not tips:
        story.append(Paragraph("No extra recommendations.", BODY_MUTED))
    else:
        story.append(_bullets([escape(t) for t in tips], BODY))

    # Matches
    story.append(Paragraph("Recommended Roles", SEC))
    if not cards:
        story.append(Paragraph("No job matches available.", BODY_MUTED))
    for card in cards:
        job, m = card.job, card.match
        story.append(Paragraph(
            f"<b>{escape(job.title)}</b> — {escape(job.company)}, {escape(job.location)}"
            f" <font color='#4F46E5'>{m.fit_score}% ({m.fit_label})</font>", BODY
        ))
        if m.reasoning:
            story.append(Paragraph(escape(m.reasoning), BODY_MUTED))
        story.append(Paragraph(f"Matching: {_join(card.matching_skills, 'none')}", BODY_MUTED))
        story.append(Paragraph(f"Missing: {_join(m.missing_skills, 'none')}", BODY_MUTED))
        story.append(Spacer(0, 6))

    def _footer(c, doc):
        text = f"ResuMatch · page {doc.page}"
        c.saveState()
        c.setFont("Helvetica", 8)
        c.setFillColor(COL_MUTED)
        w = c.stringWidth(text, "Helvetica", 8)
        c.drawString(doc.pagesize[0] - RIGHT - w, BOTTOM - 6, text)
        c.restoreState()

    doc.build(story, onFirstPage=_footer, onLaterPages=_footer)
    buf.seek(0)

def _bullets(lines: List[str], style) -> ListFlowable:
    items = [ListItem(Paragraph(r, style), leftIndent=4) for r in lines]
    return ListFlowable(
        items,
        bulletType="bullet",
        bulletFontName="Helvetica",
        bulletFontSize=8.5,
        bulletColor=COL_ACCENT,
        leftIndent=8,
        bulletOffsetY=1.5,
    )

def _hrule():
    t = Table([[""]], colWidths=[None], rowHeights=[0.8])
    t.setStyle(TableStyle([("BACKGROUND", (0,0), (-1,-1), COL_RULE)]))
    return t
