"""
Risk Aggregator
Combines base, propagated and structural risk into final scores.
"""
from loguru import logger

from core.schemas import AnalyzedNode, OwnershipEdge, RelationshipType, CIRCULAR_OWNERSHIP
from .exceptions import ClientNotFoundError
from .graph_utils import find_ancestors
from .rules import RiskRules, DEFAULT_RULES, get_risk_category


STRUCTURAL_OVERRIDE_REASON = "Structural Override: Client is part of a circular ownership structure."


def _short_name(node_id: str) -> str:
    """First two space-separated tokens of an entity id."""
    return " ".join(node_id.split(" ")[:2])


def _dedupe(items: list[str]) -> list[str]:
    return list(dict.fromkeys(items))


class RiskAggregator:
    """Derives the client's final rating and a display score for every node."""

    def __init__(self, rules: RiskRules = DEFAULT_RULES):
        self.rules = rules

    def aggregate(
        self,
        nodes: list[AnalyzedNode],
        edges: list[OwnershipEdge],
        client_id: str
    ) -> list[AnalyzedNode]:
        """
        Populate final_risk_score and risk_category on every node, and
        final_risk_reasons on the client. Nodes are updated in place.

        Raises:
            ClientNotFoundError: if `client_id` is not among `nodes`
        """
        node_map = {n.id: n for n in nodes}

        for node in nodes:
            node.final_risk_score = node.base_risk

        client = node_map.get(client_id)
        if client is None:
            logger.error(f"[aggregate] Client node not found: {client_id}")
            raise ClientNotFoundError(client_id)

        propagated_score, propagated_reasons = self._propagated_risk(node_map, edges, client_id)

        final_score = max(client.base_risk, propagated_score)
        final_reasons = client.base_risk_reasons + propagated_reasons

        if client.structural_risk == CIRCULAR_OWNERSHIP:
            final_score = max(final_score, self.rules.structural_floor)
            final_reasons.append(STRUCTURAL_OVERRIDE_REASON)

        client.final_risk_reasons = _dedupe(final_reasons)

        # Display score: own base risk or the riskiest ancestor, whichever is higher
        for node in nodes:
            if node.id == client_id:
                node.final_risk_score = final_score
            else:
                max_ancestor_risk = max(
                    (node_map[a].base_risk for a in find_ancestors(node.id, edges) if a in node_map),
                    default=0
                )
                node.final_risk_score = max(node.base_risk, max_ancestor_risk)
            node.risk_category = get_risk_category(node.final_risk_score, self.rules)

        logger.info(
            f"[aggregate] Client {client_id}: score={final_score}, "
            f"category={client.risk_category.value}, reasons={len(client.final_risk_reasons)}"
        )
        return nodes

    def _propagated_risk(
        self,
        node_map: dict[str, AnalyzedNode],
        edges: list[OwnershipEdge],
        client_id: str
    ) -> tuple[int, list[str]]:
        """
        Highest base risk among the client's ancestors and direct directors.

        Only a strictly greater score replaces the current maximum, so the
        first source reaching the maximum in iteration order is credited.
        """
        ancestors = find_ancestors(client_id, edges)
        directors = [
            e.source for e in edges
            if e.target == client_id and e.relationship == RelationshipType.DIRECTOR
        ]
        risk_sources = _dedupe(ancestors + directors)
        logger.debug(f"[_propagated_risk] {len(risk_sources)} risk sources for {client_id}")

        score = 0
        reasons: list[str] = []
        for source_id in risk_sources:
            source = node_map.get(source_id)
            if source is not None and source.base_risk > score:
                score = source.base_risk
                reasons = source.base_risk_reasons + [f"Risk propagated from {_short_name(source.id)}"]

        return score, reasons
