"""Export module facade with lazy imports.

This prevents optional PDF dependencies (WeasyPrint native libs) from breaking
CSV/XLSX exports at import time.
"""

from typing import Any


async def generate_pdf_report(*args: Any, **kwargs: Any) -> bytes:
    from .pdf_report import generate_pdf_report as _generate_pdf_report
    return await _generate_pdf_report(*args, **kwargs)


def generate_nodes_csv(*args: Any, **kwargs: Any) -> str:
    from .csv_export import generate_nodes_csv as _generate_nodes_csv
    return _generate_nodes_csv(*args, **kwargs)


def generate_edges_csv(*args: Any, **kwargs: Any) -> str:
    from .csv_export import generate_edges_csv as _generate_edges_csv
    return _generate_edges_csv(*args, **kwargs)


def generate_graph_xlsx(*args: Any, **kwargs: Any):
    from .excel_export import generate_graph_xlsx as _generate_graph_xlsx
    return _generate_graph_xlsx(*args, **kwargs)


__all__ = [
    "generate_pdf_report",
    "generate_nodes_csv",
    "generate_edges_csv",
    "generate_graph_xlsx",
]
