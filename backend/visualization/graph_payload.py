"""
Visualization Payloads
Shapes an analyzed graph into the JSON consumed by the force-directed graph
and ownership tree renderers. Renderers never send data back to the engine.
"""
import networkx as nx
from typing import Optional

from core.schemas import AnalyzedGraph, AnalyzedNode, RelationshipType
from risk.rules import RiskRules, DEFAULT_RULES, get_risk_color


CLIENT_RADIUS = 50
NODE_RADIUS = 40
VIRTUAL_ROOT_ID = "Ownership Structure"


def _ownership_digraph(graph: AnalyzedGraph) -> nx.DiGraph:
    g = nx.DiGraph()
    g.add_nodes_from(n.id for n in graph.nodes)
    for edge in graph.edges:
        if edge.relationship == RelationshipType.OWNS:
            g.add_edge(edge.source, edge.target)
    return g


def _cyclic_edges(g: nx.DiGraph) -> set[tuple[str, str]]:
    """Edges lying on at least one ownership cycle."""
    on_cycle = set()
    for component in nx.strongly_connected_components(g):
        if len(component) == 1:
            node = next(iter(component))
            if g.has_edge(node, node):
                on_cycle.add((node, node))
            continue
        for u, v in g.subgraph(component).edges():
            on_cycle.add((u, v))
    return on_cycle


def _edge_label(relationship: RelationshipType, percentage: Optional[int]) -> str:
    if relationship == RelationshipType.OWNS and percentage:
        return f"OWNS {percentage}%"
    return relationship.value


def build_force_graph(graph: AnalyzedGraph, client_id: str, rules: RiskRules = DEFAULT_RULES) -> dict:
    """Nodes and links for a force-directed layout."""
    cyclic = _cyclic_edges(_ownership_digraph(graph))

    nodes = [
        {
            "id": n.id,
            "type": n.type.value,
            "jurisdiction": n.jurisdiction,
            "depth": n.depth,
            "base_risk": n.base_risk,
            "final_risk_score": n.final_risk_score,
            "risk_category": n.risk_category.value,
            "color": get_risk_color(n.final_risk_score, rules),
            "radius": CLIENT_RADIUS if n.id == client_id else NODE_RADIUS,
            "is_client": n.id == client_id,
            "structural_risk": n.structural_risk,
        }
        for n in graph.nodes
    ]
    links = [
        {
            "source": e.source,
            "target": e.target,
            "relationship": e.relationship.value,
            "label": _edge_label(e.relationship, e.percentage),
            "is_circular": (e.source, e.target) in cyclic and e.relationship == RelationshipType.OWNS,
        }
        for e in graph.edges
    ]
    return {"client_id": client_id, "nodes": nodes, "links": links}


def _tree_node(node: AnalyzedNode, client_id: str, rules: RiskRules) -> dict:
    return {
        "id": node.id,
        "type": node.type.value,
        "final_risk_score": node.final_risk_score,
        "risk_category": node.risk_category.value,
        "color": get_risk_color(node.final_risk_score, rules),
        "is_client": node.id == client_id,
        "children": [],
    }


def build_ownership_tree(graph: AnalyzedGraph, client_id: str, rules: RiskRules = DEFAULT_RULES) -> dict:
    """
    Owner -> owned hierarchy over OWNS edges.

    Roots are entities nobody in the network owns. With exactly one root it is
    returned directly; otherwise a virtual root holds them all. A node already
    on the current branch is not expanded again, so cycles terminate.
    """
    g = _ownership_digraph(graph)
    node_map = {n.id: n for n in graph.nodes}

    def expand(node_id: str, branch: frozenset) -> dict:
        entry = _tree_node(node_map[node_id], client_id, rules)
        for child_id in g.successors(node_id):
            if child_id in branch:
                continue
            entry["children"].append(expand(child_id, branch | {child_id}))
        return entry

    roots = [n.id for n in graph.nodes if g.in_degree(n.id) == 0]
    trees = [expand(root_id, frozenset({root_id})) for root_id in roots]

    if len(trees) == 1:
        return trees[0]

    return {
        "id": VIRTUAL_ROOT_ID,
        "type": "Virtual",
        "final_risk_score": 0,
        "risk_category": "Low",
        "color": get_risk_color(0, rules),
        "is_client": False,
        "children": trees,
    }
