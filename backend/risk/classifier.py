"""
Base Risk Classifier
Assigns each entity its intrinsic risk from watch-lists and jurisdiction.
"""
from typing import AbstractSet
from loguru import logger

from core.schemas import AnalyzedNode, EntityNode, RawGraph
from .rules import RiskRules, DEFAULT_RULES


SANCTIONS_SCORE = 100
PEP_SCORE = 75
JURISDICTION_SCORE = 50


class BaseRiskClassifier:
    """Scores nodes independently of graph structure."""

    def __init__(self, rules: RiskRules = DEFAULT_RULES):
        self.rules = rules

    def classify(
        self,
        node: EntityNode,
        sanctions_list: AbstractSet[str],
        pep_list: AbstractSet[str]
    ) -> tuple[int, list[str]]:
        """
        Compute (base_risk, base_risk_reasons) for a single node.

        Sanctions and PEP matches are mutually exclusive (sanctions win);
        a high-risk jurisdiction raises the score to at least 50 and adds
        its reason after any watch-list reason.
        """
        base_risk = 0
        reasons: list[str] = []

        if node.id in sanctions_list:
            base_risk = SANCTIONS_SCORE
            reasons.append("Sanctions Match")
        elif node.id in pep_list:
            base_risk = PEP_SCORE
            reasons.append("PEP Match")

        if self.rules.is_high_risk_jurisdiction(node.jurisdiction):
            base_risk = max(base_risk, JURISDICTION_SCORE)
            reasons.append(f"Jurisdiction: {node.jurisdiction.upper()}")

        return base_risk, reasons

    def classify_all(self, graph: RawGraph) -> list[AnalyzedNode]:
        """Return fresh annotated copies of every node, preserving input order."""
        analyzed = []
        for node in graph.nodes:
            base_risk, reasons = self.classify(node, graph.sanctions_list, graph.pep_list)
            analyzed.append(AnalyzedNode(
                **node.model_dump(),
                base_risk=base_risk,
                base_risk_reasons=reasons,
            ))

        flagged = sum(1 for n in analyzed if n.base_risk > 0)
        logger.debug(f"[classify_all] Classified {len(analyzed)} nodes, {flagged} with base risk")
        return analyzed
