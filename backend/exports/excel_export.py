"""
Excel Export Module
Generates entity and relationship tables in XLSX format.
"""
import io
import pandas as pd

from core.schemas import AnalyzedGraph


NODE_COLUMNS = [
    "ID", "Type", "Jurisdiction", "Depth", "Base Risk",
    "Base Risk Reasons", "Structural Risk", "Final Score", "Risk Category"
]
EDGE_COLUMNS = ["Source", "Target", "Relationship", "Ownership %"]


def nodes_dataframe(graph: AnalyzedGraph) -> pd.DataFrame:
    rows = [
        {
            "ID": n.id,
            "Type": n.type.value,
            "Jurisdiction": n.jurisdiction.upper(),
            "Depth": n.depth,
            "Base Risk": n.base_risk,
            "Base Risk Reasons": "; ".join(n.base_risk_reasons),
            "Structural Risk": n.structural_risk or "",
            "Final Score": n.final_risk_score,
            "Risk Category": n.risk_category.value,
        }
        for n in graph.nodes
    ]
    return pd.DataFrame(rows, columns=NODE_COLUMNS)


def edges_dataframe(graph: AnalyzedGraph) -> pd.DataFrame:
    rows = [
        {
            "Source": e.source,
            "Target": e.target,
            "Relationship": e.relationship.value,
            "Ownership %": e.percentage,
        }
        for e in graph.edges
    ]
    return pd.DataFrame(rows, columns=EDGE_COLUMNS)


def generate_graph_xlsx(graph: AnalyzedGraph) -> io.BytesIO:
    """
    Generate an Excel workbook with Entities and Relationships sheets.

    Returns:
        BytesIO: A byte stream containing the Excel file.
    """
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine='openpyxl') as writer:
        nodes_dataframe(graph).to_excel(writer, index=False, sheet_name='Entities')
        edges_dataframe(graph).to_excel(writer, index=False, sheet_name='Relationships')

    output.seek(0)
    return output
