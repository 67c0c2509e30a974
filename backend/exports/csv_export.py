"""
CSV Export Module
"""
from core.schemas import AnalyzedGraph
from .excel_export import nodes_dataframe, edges_dataframe


def generate_nodes_csv(graph: AnalyzedGraph) -> str:
    return nodes_dataframe(graph).to_csv(index=False)


def generate_edges_csv(graph: AnalyzedGraph) -> str:
    return edges_dataframe(graph).to_csv(index=False)
