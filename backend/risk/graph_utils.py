"""
Graph Utilities
Ancestor reachability and ownership cycle detection over plain node/edge lists.

Both traversals use explicit work-lists instead of recursion so that deep
ownership chains cannot hit the interpreter's recursion limit.
"""
from collections import defaultdict
from typing import Iterable

from core.schemas import EntityNode, OwnershipEdge, RelationshipType


def ownership_edges(edges: Iterable[OwnershipEdge]) -> list[OwnershipEdge]:
    """Restrict an edge list to OWNS relationships."""
    return [e for e in edges if e.relationship == RelationshipType.OWNS]


def _parents_index(edges: Iterable[OwnershipEdge]) -> dict[str, list[str]]:
    parents: dict[str, list[str]] = defaultdict(list)
    for edge in edges:
        parents[edge.target].append(edge.source)
    return parents


def find_ancestors(start_node_id: str, edges: Iterable[OwnershipEdge]) -> list[str]:
    """
    Find every node that directly or transitively points at `start_node_id`.

    Edges of all relationship types are followed backward (target -> source).
    Each node is expanded at most once, so cycles terminate; the start node
    only appears in its own result when a cycle leads back to it.

    Returns:
        Ancestor ids without duplicates, in discovery order. Callers that
        take a first-wins maximum over the result depend on this order.
    """
    parents = _parents_index(edges)

    ancestors: dict[str, None] = {}
    visited: set[str] = set()
    to_visit = [start_node_id]

    while to_visit:
        current = to_visit.pop()
        if current in visited:
            continue
        visited.add(current)

        for parent_id in parents.get(current, []):
            if parent_id not in ancestors:
                ancestors[parent_id] = None
                to_visit.append(parent_id)

    return list(ancestors)


def detect_cycles(nodes: Iterable[EntityNode], edges: Iterable[OwnershipEdge]) -> list[list[str]]:
    """
    Find ownership cycles with a depth-first search.

    Only OWNS edges are considered. Whenever a neighbour that is still on the
    DFS path is reached, the slice of the path from that neighbour to the
    current node is recorded as one cycle; the neighbour closes the loop
    implicitly. Every unvisited node becomes a DFS root in node-list order, so
    the result is reproducible for a fixed node and edge order.
    """
    node_list = list(nodes)

    adjacency: dict[str, list[str]] = {node.id: [] for node in node_list}
    for edge in ownership_edges(edges):
        adjacency.setdefault(edge.source, []).append(edge.target)

    visiting: set[str] = set()
    visited: set[str] = set()
    cycles: list[list[str]] = []

    for root in node_list:
        if root.id in visited:
            continue

        path: list[str] = [root.id]
        visiting.add(root.id)
        # Each frame is (node id, index of the next neighbour to examine)
        stack: list[list] = [[root.id, 0]]

        while stack:
            frame = stack[-1]
            node_id, index = frame
            neighbors = adjacency.get(node_id, [])

            if index < len(neighbors):
                frame[1] = index + 1
                neighbor_id = neighbors[index]
                if neighbor_id in visiting:
                    cycles.append(path[path.index(neighbor_id):])
                elif neighbor_id not in visited:
                    visiting.add(neighbor_id)
                    path.append(neighbor_id)
                    stack.append([neighbor_id, 0])
                continue

            stack.pop()
            visiting.discard(node_id)
            visited.add(node_id)
            path.pop()

    return cycles
