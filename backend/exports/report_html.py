"""
Report HTML
Builds the client risk report markup rendered by the PDF exporter.
"""
from datetime import datetime
from html import escape
from typing import Optional
import base64

from core.schemas import AnalyzedGraph
from risk.rules import RISK_LEVELS


REPORT_STYLES = """
@page {
    size: A4;
    margin: 1.5cm;
    @bottom-right {
        content: "Page " counter(page) " of " counter(pages);
        font-size: 9pt;
        color: #6b7280;
    }
}
body { font-family: 'Helvetica', 'Arial', sans-serif; color: #0a0a0a; line-height: 1.5; font-size: 10pt; }
h1 { text-align: center; font-size: 20pt; margin-bottom: 4px; }
h2 { font-size: 14pt; margin-top: 18px; border-bottom: 1px solid #e5e7eb; }
.meta { display: flex; justify-content: space-between; font-size: 10pt; }
.badge { padding: 2px 10px; border-radius: 9999px; font-weight: 700; color: white; display: inline-block; }
.score { font-weight: 700; margin-left: 24px; }
table { width: 100%; border-collapse: collapse; margin-top: 6px; font-size: 9pt; }
th { background: #1e40af; color: white; text-align: left; padding: 4px; }
td { border-bottom: 1px solid #e5e7eb; padding: 4px; }
.explanation { white-space: pre-wrap; }
.visual img { width: 100%; }
"""


def _svg_data_uri(svg: str) -> str:
    encoded = base64.b64encode(svg.encode("utf-8")).decode("utf-8")
    return f"data:image/svg+xml;base64,{encoded}"


def render_report_html(
    graph: AnalyzedGraph,
    client_id: str,
    explanation: str,
    visualization_svg: Optional[str] = None,
    generated_at: Optional[datetime] = None
) -> str:
    """Build the report HTML. Raises ValueError when the client is not in the graph."""
    client = graph.get_node(client_id)
    if client is None:
        raise ValueError(f"Client {client_id} not found in analyzed graph")

    category = client.risk_category
    color = RISK_LEVELS[category]["color"]
    report_date = (generated_at or datetime.now()).strftime("%B %d, %Y")

    reasons = client.final_risk_reasons or ["No significant risk factors identified."]
    reasons_html = "".join(f"<li>{escape(r)}</li>" for r in reasons)

    visual_html = ""
    if visualization_svg:
        visual_html = f"""
        <h2>Network Visualization</h2>
        <div class="visual"><img src="{_svg_data_uri(visualization_svg)}"></div>
        """

    node_rows = "".join(
        f"<tr><td>{escape(n.id)}</td><td>{n.type.value}</td><td>{escape(n.jurisdiction.upper())}</td>"
        f"<td>{n.base_risk}</td><td>{n.final_risk_score}</td></tr>"
        for n in graph.nodes
    )
    edge_rows = "".join(
        f"<tr><td>{escape(e.source)}</td><td>{escape(e.target)}</td><td>{e.relationship.value}</td>"
        f"<td>{f'{e.percentage}%' if e.percentage else 'N/A'}</td></tr>"
        for e in graph.edges
    )

    return f"""
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <style>{REPORT_STYLES}</style>
</head>
<body>
    <h1>Client Risk Analysis Report</h1>
    <div class="meta">
        <span>Client: {escape(client.id)}</span>
        <span>Report Date: {report_date}</span>
    </div>

    <h2>Risk Analysis Summary</h2>
    <p>
        Final Rating: <span class="badge" style="background-color: {color}">{category.value}</span>
        <span class="score">Risk Score: {client.final_risk_score}</span>
    </p>
    <p><strong>Key Risk Factors:</strong></p>
    <ul>{reasons_html}</ul>

    <h2>AI-Powered Explanation</h2>
    <p class="explanation">{escape(explanation)}</p>

    {visual_html}

    <h2>Entities (Nodes)</h2>
    <table>
        <thead><tr><th>ID</th><th>Type</th><th>Jurisdiction</th><th>Base Risk</th><th>Final Score</th></tr></thead>
        <tbody>{node_rows}</tbody>
    </table>

    <h2>Relationships (Edges)</h2>
    <table>
        <thead><tr><th>Source</th><th>Target</th><th>Relationship</th><th>Ownership %</th></tr></thead>
        <tbody>{edge_rows}</tbody>
    </table>
</body>
</html>
"""


def report_filename(client_id: str) -> str:
    return f"Client_Risk_Report_{'_'.join(client_id.split())}.pdf"
