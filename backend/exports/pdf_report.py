"""
PDF Report Generator
Generates client risk reports in PDF format using WeasyPrint.
"""
from typing import Optional
from weasyprint import HTML
from io import BytesIO

from core.schemas import AnalyzedGraph
from .report_html import render_report_html


async def generate_pdf_report(
    graph: AnalyzedGraph,
    client_id: str,
    explanation: str,
    visualization_svg: Optional[str] = None
) -> bytes:
    """Render the client risk report to PDF bytes."""
    html_content = render_report_html(graph, client_id, explanation, visualization_svg)

    buffer = BytesIO()
    HTML(string=html_content).write_pdf(buffer)
    return buffer.getvalue()
