"""
Network API Routes
Generates synthetic ownership networks from scenarios.
"""
from fastapi import APIRouter, HTTPException
from loguru import logger

from core.schemas import NetworkGenerateRequest, RawGraph
from generators.network_generator import (
    TEST_CASES, NetworkGenerator, generate_random_test_case
)

router = APIRouter()

# In-memory storage for generated networks
networks: dict[str, dict] = {}


@router.get("/scenarios")
async def list_scenarios():
    """List the predefined scenarios."""
    return {
        key: case.model_dump()
        for key, case in TEST_CASES.items()
    }


@router.post("/generate")
async def generate_network(request: NetworkGenerateRequest):
    """
    Generate a network from a predefined scenario, an explicit test case,
    or a random scenario when neither is given.
    """
    if request.test_case is not None:
        test_case = request.test_case
    elif request.scenario:
        if request.scenario not in TEST_CASES:
            raise HTTPException(status_code=404, detail=f"Unknown scenario: {request.scenario}")
        test_case = TEST_CASES[request.scenario]
    else:
        test_case = generate_random_test_case(seed=request.seed)

    logger.info(f"[generate_network] Generating '{test_case.title}' for {test_case.client_id}")
    graph = NetworkGenerator(seed=request.seed).generate(test_case)

    graph_id = f"network_{len(networks)}"
    networks[graph_id] = {"test_case": test_case, "graph": graph}

    return {
        "graph_id": graph_id,
        "test_case": test_case.model_dump(),
        "node_count": len(graph.nodes),
        "edge_count": len(graph.edges),
        "graph": graph.model_dump(mode="json"),
    }


@router.get("/{graph_id}", response_model=RawGraph)
async def get_network(graph_id: str):
    """Get a generated network by ID."""
    if graph_id not in networks:
        raise HTTPException(status_code=404, detail="Network not found")
    return networks[graph_id]["graph"]
