"""
Network Generator - Builds synthetic ownership networks for analysis.

Produces a complete raw graph (nodes, OWNS/DIRECTOR edges, sanctions and
PEP lists) from scenario parameters. A seed makes the output reproducible.
"""
import random
from typing import Optional
from loguru import logger

from config import settings
from core.schemas import (
    EntityNode, OwnershipEdge, RawGraph, TestCase, NodeType, RelationshipType
)


FIRST_NAMES = ["John", "Jane", "Peter", "Mary", "David", "Susan", "Michael", "Linda"]
LAST_NAMES = ["Smith", "Jones", "Williams", "Brown", "Davis", "Miller", "Wilson", "Moore"]
COMPANY_NOUNS = ["Apex", "Vertex", "Zenith", "Nadir", "Omega", "Alpha", "Quantum", "Stellar"]
COMPANY_ADJECTIVES = ["Global", "Dynamic", "Innovative", "Strategic", "Advanced", "Prime", "NextGen"]
COMPANY_SUFFIXES = ["Ltd.", "Inc.", "GmbH", "S.A.", "Holdings", "Ventures"]


TEST_CASES: dict[str, TestCase] = {
    "alpha": TestCase(
        client_id="Test Client Alpha",
        avg_nodes=8,
        max_depth=3,
        risk_prob=0.1,
        circular_prob=0.0,
        title="Simple & Low-Risk Network"
    ),
    "bravo": TestCase(
        client_id="Test Client Bravo",
        avg_nodes=20,
        max_depth=5,
        risk_prob=0.4,
        circular_prob=1.0,
        title="Complex & High-Risk Network"
    ),
    "charlie": TestCase(
        client_id="Test Client Charlie",
        avg_nodes=15,
        max_depth=4,
        risk_prob=0.8,
        circular_prob=0.5,
        title="Stress Test (Sanctioned)"
    ),
}


class NetworkGenerator:
    """Generates synthetic ownership networks around a client company."""

    def __init__(
        self,
        seed: Optional[int] = None,
        jurisdictions: Optional[list[str]] = None,
        high_risk_jurisdictions: Optional[list[str]] = None
    ):
        self.rng = random.Random(seed)
        self.jurisdictions = jurisdictions or list(settings.ALL_JURISDICTIONS)
        self.high_risk_jurisdictions = set(
            high_risk_jurisdictions if high_risk_jurisdictions is not None
            else settings.HIGH_RISK_JURISDICTIONS
        )

    def _person_name(self) -> str:
        return f"{self.rng.choice(FIRST_NAMES)} {self.rng.choice(LAST_NAMES)}"

    def _trust_name(self) -> str:
        return f"The {self.rng.choice(LAST_NAMES)} Family Trust"

    def _company_name(self) -> str:
        return f"{self.rng.choice(COMPANY_ADJECTIVES)} {self.rng.choice(COMPANY_NOUNS)} {self.rng.choice(COMPANY_SUFFIXES)}"

    def _create_node(self, depth: int, max_depth: int, entity_type: Optional[NodeType] = None) -> EntityNode:
        """Create a random entity; the top layer holds only people and trusts."""
        if entity_type is None:
            if depth == max_depth:
                entity_type = NodeType.PERSON if self.rng.random() < 0.5 else NodeType.TRUST
            else:
                roll = self.rng.random()
                if roll < 0.8:
                    entity_type = NodeType.CORPORATE
                elif roll < 0.95:
                    entity_type = NodeType.TRUST
                else:
                    entity_type = NodeType.PERSON

        jurisdiction = self.rng.choice(self.jurisdictions)

        if entity_type == NodeType.PERSON:
            node_id = self._person_name()
        elif entity_type == NodeType.TRUST:
            node_id = self._trust_name()
        else:
            node_id = self._company_name()

        return EntityNode(id=node_id, type=entity_type, jurisdiction=jurisdiction, depth=depth)

    def _unique_node(
        self,
        existing: dict[str, EntityNode],
        depth: int,
        max_depth: int,
        entity_type: Optional[NodeType] = None
    ) -> Optional[EntityNode]:
        # The name space is finite; give up rather than loop forever
        for _ in range(1000):
            node = self._create_node(depth, max_depth, entity_type)
            if node.id not in existing:
                return node
        logger.warning("[_unique_node] Exhausted unique names, skipping node")
        return None

    def generate(self, test_case: TestCase) -> RawGraph:
        """
        Generate a raw ownership network for a scenario.

        Args:
            test_case: Scenario parameters (client id, size, depth, probabilities)

        Returns:
            RawGraph with the client at depth 0, owners above it, optional
            circular link and 1-3 directors of the client
        """
        logger.info(f"[generate] Generating network for {test_case.client_id} ({test_case.title})")

        sanctions: set[str] = set()
        peps: set[str] = set()
        nodes: list[EntityNode] = []
        edges: list[OwnershipEdge] = []
        node_map: dict[str, EntityNode] = {}

        client_jurisdiction = next(
            (j for j in self.jurisdictions if j not in self.high_risk_jurisdictions), "uk"
        )
        client = EntityNode(
            id=test_case.client_id,
            type=NodeType.CORPORATE,
            jurisdiction=client_jurisdiction,
            depth=0
        )
        nodes.append(client)
        node_map[client.id] = client

        frontier = [client.id]
        to_create = min(test_case.avg_nodes, settings.MAX_GRAPH_NODES) - 1

        while to_create > 0 and frontier:
            ownee_id = frontier.pop(self.rng.randrange(len(frontier)))
            ownee = node_map[ownee_id]
            if ownee.depth >= test_case.max_depth:
                continue

            num_owners = self.rng.randint(1, 2)
            for _ in range(num_owners):
                if to_create <= 0:
                    break
                owner = self._unique_node(node_map, ownee.depth + 1, test_case.max_depth)
                if owner is None:
                    break

                node_map[owner.id] = owner
                nodes.append(owner)
                edges.append(OwnershipEdge(
                    source=owner.id,
                    target=ownee_id,
                    relationship=RelationshipType.OWNS,
                    percentage=self.rng.randint(10, 100)
                ))
                to_create -= 1

                if owner.type != NodeType.PERSON:
                    frontier.append(owner.id)

                if self.rng.random() < test_case.risk_prob:
                    if self.rng.random() < 0.3:
                        sanctions.add(owner.id)
                    else:
                        peps.add(owner.id)

        if self.rng.random() < test_case.circular_prob:
            self._add_circular_link(nodes, edges, test_case.client_id)

        num_directors = self.rng.randint(1, 3)
        for _ in range(num_directors):
            director = self._unique_node(node_map, 1, test_case.max_depth, NodeType.PERSON)
            if director is None:
                break
            node_map[director.id] = director
            nodes.append(director)
            edges.append(OwnershipEdge(
                source=director.id,
                target=test_case.client_id,
                relationship=RelationshipType.DIRECTOR
            ))
            if self.rng.random() < test_case.risk_prob:
                peps.add(director.id)

        logger.info(
            f"[generate] Generated {len(nodes)} nodes, {len(edges)} edges, "
            f"{len(sanctions)} sanctioned, {len(peps)} PEPs"
        )
        return RawGraph(nodes=nodes, edges=edges, sanctions_list=sanctions, pep_list=peps)

    def _add_circular_link(self, nodes: list[EntityNode], edges: list[OwnershipEdge], client_id: str):
        """Link one non-person entity to another so ownership can loop back."""
        candidates = [n for n in nodes if n.type != NodeType.PERSON and n.id != client_id]
        if len(candidates) <= 2:
            return

        node_a = self.rng.choice(candidates)
        node_b = self.rng.choice([n for n in candidates if n.id != node_a.id])
        edges.append(OwnershipEdge(
            source=node_a.id,
            target=node_b.id,
            relationship=RelationshipType.OWNS,
            percentage=self.rng.randint(5, 20)
        ))
        logger.debug(f"[_add_circular_link] {node_a.id} -> {node_b.id}")


def generate_network(test_case: TestCase, seed: Optional[int] = None) -> RawGraph:
    """Generate a network with a fresh generator."""
    return NetworkGenerator(seed=seed).generate(test_case)


def generate_random_test_case(seed: Optional[int] = None) -> TestCase:
    """Build a random scenario for ad-hoc analysis."""
    rng = random.Random(seed)
    suffix = rng.randint(100, 999)
    return TestCase(
        client_id=f"Random Client {suffix}",
        avg_nodes=rng.randint(5, 30),
        max_depth=rng.randint(2, 6),
        risk_prob=round(rng.uniform(0, 0.8), 2),
        circular_prob=round(rng.random(), 2),
        title=f"Random Scenario #{suffix}"
    )
