"""
Risk Explainer
Turns a client's final rating into a plain-language compliance summary.

The explainer only reads the analyzed graph; the risk engine never depends
on it.
"""
from typing import Optional
from loguru import logger

from core.gemini_client import GeminiClient
from core.schemas import AnalyzedGraph, AnalyzedNode


LOW_RISK_MESSAGE = (
    "The client has a low risk score, so no detailed AI explanation is necessary. "
    "All associated entities are in good standing."
)
NOT_CONFIGURED_MESSAGE = "API key is not configured. Cannot generate AI explanation."
EMPTY_RESPONSE_MESSAGE = (
    "The AI model returned an empty response. "
    "This could be due to content safety filters or an API issue."
)
FAILURE_MESSAGE = (
    "Could not generate AI explanation. "
    "The API may be unavailable or the content was blocked."
)


def build_explanation_prompt(client: AnalyzedNode, graph: AnalyzedGraph) -> str:
    """Compose the analyst prompt from the client rating and other high-risk entities."""
    high_risk_entities = "\n".join(
        f"- {n.id} ({n.type.value}) due to: {', '.join(n.base_risk_reasons)}"
        for n in graph.nodes
        if n.base_risk >= 50 and n.id != client.id
    )
    factors = "\n".join(f"- {r}" for r in (client.final_risk_reasons or []))

    return f"""Act as a senior financial crime compliance analyst.
Your task is to provide a concise, professional, and easy-to-understand summary explaining a client's risk rating.

Client Details:
- Name: {client.id}
- Final Risk Score: {client.final_risk_score}
- Risk Category: {client.risk_category.value}

Key Risk Factors Identified by the System:
{factors or "None"}

Other High-Risk Entities in the Ownership Structure:
{high_risk_entities or "None"}

Based on the information above, please generate a summary. The summary should:
1. Start with a clear statement of the client's final risk rating and score.
2. Explain the primary reasons for this rating, referencing the key risk factors.
3. Mention how the complex structure and any high-risk entities contribute to the overall risk profile.
4. Be formatted for clarity and readability. Do not use markdown formatting.
"""


class RiskExplainer:
    """Generates narrative explanations with Gemini."""

    def __init__(self, gemini: Optional[GeminiClient] = None):
        self._gemini = gemini

    @property
    def gemini(self) -> GeminiClient:
        if self._gemini is None:
            self._gemini = GeminiClient()
        return self._gemini

    async def explain(self, client: AnalyzedNode, graph: AnalyzedGraph) -> tuple[str, bool]:
        """
        Explain the client's rating.

        Returns:
            (explanation text, whether the text came from the model)
        """
        if client.final_risk_score <= 0:
            return LOW_RISK_MESSAGE, False

        if not self.gemini.is_configured:
            return NOT_CONFIGURED_MESSAGE, False

        prompt = build_explanation_prompt(client, graph)
        result = await self.gemini.generate(prompt=prompt, purpose="risk_explanation")

        if result.get("text"):
            return result["text"].strip(), True

        error = result.get("error") or ""
        logger.warning(f"[explain] No explanation for {client.id}: {error}")
        if "empty response" in error.lower():
            return EMPTY_RESPONSE_MESSAGE, False
        return FAILURE_MESSAGE, False
