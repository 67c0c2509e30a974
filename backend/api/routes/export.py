"""
Export API Routes
Handles PDF, XLSX and CSV exports of analysis results.
"""
from fastapi import APIRouter, HTTPException
from fastapi.responses import StreamingResponse, Response
from typing import Literal, Optional
import io
from loguru import logger

from api.routes.analysis import get_analysis
from exports.report_html import report_filename

router = APIRouter()


def _build_export_error(code: str, message: str, exc: Exception, hint: Optional[str] = None) -> dict:
    """Build a structured export error payload with true exception details."""
    return {
        "code": code,
        "message": message,
        "exception_type": type(exc).__name__,
        "exception_message": str(exc),
        "hint": hint,
    }


@router.get("/{analysis_id}/pdf")
async def export_pdf(analysis_id: str):
    """
    Export the client risk report as PDF.
    Uses the cached narrative explanation when one was generated.
    """
    stored = get_analysis(analysis_id)
    result = stored["result"]
    explanation = (stored.get("explanation") or {}).get("text") or "No explanation generated."

    try:
        from exports import generate_pdf_report
        pdf_bytes = await generate_pdf_report(
            graph=result.graph,
            client_id=stored["client_id"],
            explanation=explanation,
        )
    except Exception as e:
        logger.exception(f"PDF export failed for analysis_id={analysis_id}: {e}")
        err_msg = str(e).lower()
        is_dependency_issue = any(token in err_msg for token in [
            "libgobject",
            "libpango",
            "libgdk-pixbuf",
            "weasyprint"
        ])
        raise HTTPException(
            status_code=500,
            detail=_build_export_error(
                code="PDF_EXPORT_FAILED",
                message="Failed to generate PDF report",
                exc=e,
                hint="Install WeasyPrint system libraries (Pango, GDK-PixBuf)" if is_dependency_issue else None,
            )
        )

    return StreamingResponse(
        io.BytesIO(pdf_bytes),
        media_type="application/pdf",
        headers={"Content-Disposition": f"attachment; filename={report_filename(stored['client_id'])}"}
    )


@router.get("/{analysis_id}/xlsx")
async def export_xlsx(analysis_id: str):
    """Export entities and relationships as an Excel workbook."""
    stored = get_analysis(analysis_id)

    try:
        from exports import generate_graph_xlsx
        output = generate_graph_xlsx(stored["result"].graph)
    except Exception as e:
        logger.exception(f"XLSX export failed for analysis_id={analysis_id}: {e}")
        raise HTTPException(
            status_code=500,
            detail=_build_export_error("XLSX_EXPORT_FAILED", "Failed to generate Excel export", e)
        )

    return StreamingResponse(
        output,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": f"attachment; filename=risk_analysis_{analysis_id}.xlsx"}
    )


@router.get("/{analysis_id}/csv")
async def export_csv(analysis_id: str, table: Literal["nodes", "edges"] = "nodes"):
    """Export the entity or relationship table as CSV."""
    from exports import generate_nodes_csv, generate_edges_csv

    stored = get_analysis(analysis_id)
    graph = stored["result"].graph
    content = generate_nodes_csv(graph) if table == "nodes" else generate_edges_csv(graph)

    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={table}_{analysis_id}.csv"}
    )
