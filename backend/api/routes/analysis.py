"""
Analysis API Routes
Runs the risk engine over generated networks and serves the results.
"""
from fastapi import APIRouter, HTTPException
from loguru import logger

from core.schemas import AnalysisRequest, AnalysisSummary, AnalyzedGraph, ExplanationResponse
from risk import get_risk_engine
from visualization.graph_payload import build_force_graph, build_ownership_tree

router = APIRouter()

# In-memory storage for analysis results
analysis_results: dict[str, dict] = {}


def get_analysis(analysis_id: str) -> dict:
    if analysis_id not in analysis_results:
        raise HTTPException(status_code=404, detail="Analysis not found")
    return analysis_results[analysis_id]


@router.post("/run", response_model=AnalysisSummary)
async def run_analysis(request: AnalysisRequest):
    """
    Analyze a generated network for its client.

    A missing client is reported as a failed analysis (422), never as a
    partial result.
    """
    from api.routes.network import networks

    if request.graph_id not in networks:
        raise HTTPException(status_code=404, detail="Network not found")

    stored = networks[request.graph_id]
    client_id = request.client_id or stored["test_case"].client_id

    result = get_risk_engine().analyze(stored["graph"], client_id)
    if not result.success:
        logger.warning(f"[run_analysis] Analysis failed for {request.graph_id}: {result.error}")
        raise HTTPException(status_code=422, detail=result.error)

    analysis_id = f"analysis_{len(analysis_results)}"
    analysis_results[analysis_id] = {
        "graph_id": request.graph_id,
        "client_id": client_id,
        "result": result,
        "explanation": None,
    }

    client = result.client
    logger.info(f"[run_analysis] {analysis_id}: {client_id} rated {client.risk_category.value} ({client.final_risk_score})")

    return AnalysisSummary(
        analysis_id=analysis_id,
        graph_id=request.graph_id,
        client_id=client_id,
        final_risk_score=client.final_risk_score,
        risk_category=client.risk_category,
        final_risk_reasons=client.final_risk_reasons or [],
        node_count=len(result.graph.nodes),
        edge_count=len(result.graph.edges),
        cycle_count=len(result.cycles),
        dropped_edges=result.dropped_edges,
    )


@router.get("/{analysis_id}", response_model=AnalyzedGraph)
async def get_analyzed_graph(analysis_id: str):
    """Get the annotated graph of an analysis."""
    return get_analysis(analysis_id)["result"].graph


@router.get("/{analysis_id}/graph")
async def get_force_graph(analysis_id: str):
    """Force-directed graph payload."""
    stored = get_analysis(analysis_id)
    return build_force_graph(stored["result"].graph, stored["client_id"], get_risk_engine().rules)


@router.get("/{analysis_id}/tree")
async def get_ownership_tree(analysis_id: str):
    """Ownership tree payload."""
    stored = get_analysis(analysis_id)
    return build_ownership_tree(stored["result"].graph, stored["client_id"], get_risk_engine().rules)


@router.post("/{analysis_id}/explain", response_model=ExplanationResponse)
async def explain_analysis(analysis_id: str):
    """Generate (or return the cached) narrative explanation for the client."""
    from narrative.explainer import RiskExplainer

    stored = get_analysis(analysis_id)
    result = stored["result"]

    if stored["explanation"] is None:
        text, generated = await RiskExplainer().explain(result.client, result.graph)
        stored["explanation"] = {"text": text, "generated_by_ai": generated}

    return ExplanationResponse(
        analysis_id=analysis_id,
        client_id=stored["client_id"],
        explanation=stored["explanation"]["text"],
        generated_by_ai=stored["explanation"]["generated_by_ai"],
    )
