"""
Pydantic Schemas for the Ownership Risk Analyzer
"""
from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional
from enum import Enum


# ============================================
# Enums
# ============================================

class NodeType(str, Enum):
    CORPORATE = "Corporate"
    TRUST = "Trust"
    PERSON = "Person"


class RelationshipType(str, Enum):
    OWNS = "OWNS"
    DIRECTOR = "DIRECTOR"


class RiskCategory(str, Enum):
    PROHIBITED = "Prohibited"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


CIRCULAR_OWNERSHIP = "Circular Ownership"


# ============================================
# Graph Schemas
# ============================================

class EntityNode(BaseModel):
    """A node in the ownership graph as produced by the network generator."""
    id: str  # Human-readable name, unique within a graph
    type: NodeType
    jurisdiction: str  # Lowercase code, e.g. "bvi"
    depth: int = Field(default=0, ge=0)  # Distance from the client (0 = client)

    @field_validator("jurisdiction")
    @classmethod
    def normalize_jurisdiction(cls, v: str) -> str:
        """Jurisdiction codes are matched in lowercase."""
        return v.strip().lower()


class AnalyzedNode(EntityNode):
    """A node annotated by the risk engine."""
    base_risk: int = 0
    base_risk_reasons: list[str] = []
    structural_risk: Optional[str] = None  # "Circular Ownership" when in a cycle
    final_risk_score: int = 0
    final_risk_reasons: Optional[list[str]] = None  # Client carries the full derivation
    risk_category: RiskCategory = RiskCategory.LOW


class OwnershipEdge(BaseModel):
    """An edge in the ownership graph."""
    source: str
    target: str  # Owned entity for OWNS, company for DIRECTOR
    relationship: RelationshipType
    percentage: Optional[int] = Field(default=None, ge=0, le=100)


class RawGraph(BaseModel):
    """Generator output: complete node/edge set plus watch-lists."""
    nodes: list[EntityNode]
    edges: list[OwnershipEdge]
    sanctions_list: set[str] = set()
    pep_list: set[str] = set()

    @model_validator(mode="after")
    def validate_unique_node_ids(self) -> "RawGraph":
        seen = set()
        duplicates = []
        for node in self.nodes:
            if node.id in seen and node.id not in duplicates:
                duplicates.append(node.id)
            seen.add(node.id)
        if duplicates:
            raise ValueError(f"Duplicate node ids: {', '.join(duplicates)}")
        return self


class AnalyzedGraph(BaseModel):
    """Engine output consumed read-only by renderers, exporters and the explainer."""
    nodes: list[AnalyzedNode]
    edges: list[OwnershipEdge]

    def get_node(self, node_id: str) -> Optional[AnalyzedNode]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None


class AnalysisResult(BaseModel):
    """Outcome of one engine run. On failure only `error` is populated."""
    success: bool
    client_id: str
    graph: Optional[AnalyzedGraph] = None
    client: Optional[AnalyzedNode] = None
    cycles: list[list[str]] = []
    dropped_edges: int = 0
    error: Optional[str] = None


# ============================================
# Scenario Schemas
# ============================================

class TestCase(BaseModel):
    """Parameters for the synthetic network generator."""
    __test__ = False  # Not a pytest test class

    client_id: str
    avg_nodes: int = Field(ge=1)
    max_depth: int = Field(ge=1)
    risk_prob: float = Field(ge=0, le=1)
    circular_prob: float = Field(ge=0, le=1)
    title: str


# ============================================
# API Schemas
# ============================================

class NetworkGenerateRequest(BaseModel):
    """Request to generate a synthetic network."""
    scenario: Optional[str] = None  # Key into TEST_CASES; random when both are empty
    test_case: Optional[TestCase] = None
    seed: Optional[int] = None


class AnalysisRequest(BaseModel):
    """Request to analyze a generated network."""
    graph_id: str
    client_id: Optional[str] = None  # Defaults to the scenario's client


class AnalysisSummary(BaseModel):
    """Client-level summary returned by the analysis endpoints."""
    analysis_id: str
    graph_id: str
    client_id: str
    final_risk_score: int
    risk_category: RiskCategory
    final_risk_reasons: list[str]
    node_count: int
    edge_count: int
    cycle_count: int
    dropped_edges: int = 0


class ExplanationResponse(BaseModel):
    """Narrative explanation of a client's rating."""
    analysis_id: str
    client_id: str
    explanation: str
    generated_by_ai: bool
