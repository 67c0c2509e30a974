"""
Risk Engine
Runs classification, cycle detection and aggregation over one graph.
"""
from typing import Optional
from loguru import logger

from core.schemas import (
    AnalysisResult, AnalyzedGraph, AnalyzedNode, OwnershipEdge, RawGraph, CIRCULAR_OWNERSHIP
)
from .aggregator import RiskAggregator
from .classifier import BaseRiskClassifier
from .exceptions import ClientNotFoundError
from .graph_utils import detect_cycles
from .rules import RiskRules, DEFAULT_RULES


# Shared instance for the API layer
_risk_engine_instance: Optional["RiskEngine"] = None


def get_risk_engine() -> "RiskEngine":
    """Get or create the shared RiskEngine configured from settings."""
    global _risk_engine_instance
    if _risk_engine_instance is None:
        from config import settings
        _risk_engine_instance = RiskEngine(rules=settings.risk_rules())
    return _risk_engine_instance


class RiskEngine:
    """
    Full, synchronous analysis pass for a single client.

    The raw graph is never mutated; every call builds fresh annotated nodes,
    so no partial result is observable before `analyze` returns.
    """

    def __init__(self, rules: RiskRules = DEFAULT_RULES):
        self.rules = rules
        self.classifier = BaseRiskClassifier(rules)
        self.aggregator = RiskAggregator(rules)

    def analyze(self, graph: RawGraph, client_id: str) -> AnalysisResult:
        """
        Analyze `graph` for `client_id`.

        Returns:
            AnalysisResult with success=False and an error message when the
            client is missing; otherwise the annotated graph, the client node
            and the detected ownership cycles.
        """
        logger.info(f"[analyze] Starting analysis for {client_id} ({len(graph.nodes)} nodes, {len(graph.edges)} edges)")

        usable_edges = self._usable_edges(graph)
        dropped = len(graph.edges) - len(usable_edges)

        nodes = self.classifier.classify_all(graph)

        cycles = detect_cycles(graph.nodes, usable_edges)
        self._tag_cycles(nodes, cycles)

        try:
            nodes = self.aggregator.aggregate(nodes, usable_edges, client_id)
        except ClientNotFoundError as e:
            logger.warning(f"[analyze] Analysis failed: {e}")
            return AnalysisResult(success=False, client_id=client_id, error=str(e))

        analyzed = AnalyzedGraph(nodes=nodes, edges=list(graph.edges))
        return AnalysisResult(
            success=True,
            client_id=client_id,
            graph=analyzed,
            client=analyzed.get_node(client_id),
            cycles=cycles,
            dropped_edges=dropped,
        )

    def _usable_edges(self, graph: RawGraph) -> list[OwnershipEdge]:
        """Drop edges whose endpoints are not in the node set."""
        node_ids = {n.id for n in graph.nodes}
        usable = []
        for edge in graph.edges:
            if edge.source in node_ids and edge.target in node_ids:
                usable.append(edge)
            else:
                logger.warning(f"[_usable_edges] Ignoring dangling edge {edge.source} -> {edge.target}")
        return usable

    def _tag_cycles(self, nodes: list[AnalyzedNode], cycles: list[list[str]]):
        members = {node_id for cycle in cycles for node_id in cycle}
        for node in nodes:
            if node.id in members:
                node.structural_risk = CIRCULAR_OWNERSHIP
        if cycles:
            logger.info(f"[_tag_cycles] {len(cycles)} ownership cycle(s), {len(members)} entities tagged")


def analyze_client_risk(graph: RawGraph, client_id: str, rules: RiskRules = DEFAULT_RULES) -> AnalysisResult:
    """Convenience wrapper for a one-off analysis."""
    return RiskEngine(rules).analyze(graph, client_id)
