"""
Tests for risk aggregation.
"""
import pytest

from core.schemas import RawGraph, NodeType, RiskCategory, CIRCULAR_OWNERSHIP
from risk.aggregator import RiskAggregator, STRUCTURAL_OVERRIDE_REASON
from risk.classifier import BaseRiskClassifier
from risk.exceptions import ClientNotFoundError
from tests.graph_builders import make_node, owns, directs


def classified(graph: RawGraph):
    return BaseRiskClassifier().classify_all(graph)


def by_id(nodes):
    return {n.id: n for n in nodes}


class TestPropagation:
    """Test propagated risk for the client."""

    @pytest.fixture
    def aggregator(self):
        return RiskAggregator()

    def test_sanctioned_grandparent(self, aggregator, sanctioned_chain_graph):
        """Test sanctions two levels up reach the client."""
        nodes = aggregator.aggregate(classified(sanctioned_chain_graph), sanctioned_chain_graph.edges, "Client C")
        client = by_id(nodes)["Client C"]

        assert client.final_risk_score == 100
        assert client.risk_category == RiskCategory.PROHIBITED
        assert client.final_risk_reasons == ["Sanctions Match", "Risk propagated from Alpha A"]

    def test_pep_director_beats_clean_director(self, aggregator, director_graph):
        """Test the riskier of two directors is credited."""
        nodes = aggregator.aggregate(classified(director_graph), director_graph.edges, "Client E")
        client = by_id(nodes)["Client E"]

        assert client.final_risk_score == 75
        assert client.risk_category == RiskCategory.HIGH
        assert client.final_risk_reasons == ["PEP Match", "Risk propagated from Paula One"]

    def test_first_maximum_wins(self, aggregator):
        """Test ties keep the first source found."""
        graph = RawGraph(
            nodes=[make_node("Client"), make_node("First Owner Ltd."), make_node("Second Owner Ltd.")],
            edges=[owns("First Owner Ltd.", "Client"), owns("Second Owner Ltd.", "Client")],
            sanctions_list={"First Owner Ltd.", "Second Owner Ltd."},
        )
        client = by_id(aggregator.aggregate(classified(graph), graph.edges, "Client"))["Client"]

        assert client.final_risk_reasons == ["Sanctions Match", "Risk propagated from First Owner"]

    def test_client_base_risk_kept_when_higher(self, aggregator):
        """Test propagation never lowers the client's own risk."""
        graph = RawGraph(
            nodes=[make_node("Client"), make_node("Offshore Parent", jurisdiction="malta")],
            edges=[owns("Offshore Parent", "Client")],
            sanctions_list={"Client"},
        )
        client = by_id(aggregator.aggregate(classified(graph), graph.edges, "Client"))["Client"]

        assert client.final_risk_score == 100
        assert client.final_risk_reasons == [
            "Sanctions Match", "Jurisdiction: MALTA", "Risk propagated from Offshore Parent"
        ]

    def test_reasons_deduplicated(self, aggregator):
        """Test duplicate reasons collapse to the first occurrence."""
        graph = RawGraph(
            nodes=[make_node("Client", jurisdiction="bvi"), make_node("Parent Co", jurisdiction="bvi")],
            edges=[owns("Parent Co", "Client")],
        )
        client = by_id(aggregator.aggregate(classified(graph), graph.edges, "Client"))["Client"]

        assert client.final_risk_reasons == ["Jurisdiction: BVI", "Risk propagated from Parent Co"]

    def test_no_ancestors(self, aggregator, isolated_client_graph):
        """Test an isolated client keeps its base risk and has no reasons."""
        nodes = aggregator.aggregate(classified(isolated_client_graph), isolated_client_graph.edges, "Client D")
        client = by_id(nodes)["Client D"]

        assert client.final_risk_score == 0
        assert client.risk_category == RiskCategory.LOW
        assert client.final_risk_reasons == []

    def test_zero_risk_sources_do_not_propagate(self, aggregator):
        """Test clean ancestors add no propagation reason."""
        graph = RawGraph(nodes=[make_node("Client"), make_node("Clean Parent")], edges=[owns("Clean Parent", "Client")])
        client = by_id(aggregator.aggregate(classified(graph), graph.edges, "Client"))["Client"]

        assert client.final_risk_reasons == []


class TestStructuralOverride:
    """Test the circular ownership floor."""

    def test_client_in_cycle(self, two_cycle_graph):
        """Test a client in a 2-cycle is raised to 90."""
        nodes = classified(two_cycle_graph)
        for node in nodes:
            node.structural_risk = CIRCULAR_OWNERSHIP

        client = by_id(RiskAggregator().aggregate(nodes, two_cycle_graph.edges, "X Corp"))["X Corp"]

        assert client.final_risk_score == 90
        assert client.risk_category == RiskCategory.HIGH
        assert client.final_risk_reasons == [STRUCTURAL_OVERRIDE_REASON]

    def test_floor_does_not_lower_higher_score(self, two_cycle_graph):
        """Test a sanctioned cycle member keeps 100."""
        graph = two_cycle_graph.model_copy(update={"sanctions_list": {"Y Corp"}})
        nodes = classified(graph)
        for node in nodes:
            node.structural_risk = CIRCULAR_OWNERSHIP

        client = by_id(RiskAggregator().aggregate(nodes, graph.edges, "X Corp"))["X Corp"]

        assert client.final_risk_score == 100
        assert client.final_risk_reasons[-1] == STRUCTURAL_OVERRIDE_REASON


class TestDisplayScores:
    """Test display scores on non-client nodes."""

    def test_ancestor_risk_colours_descendants(self, sanctioned_chain_graph):
        """Test intermediate owners inherit the riskiest ancestor for display."""
        nodes = by_id(RiskAggregator().aggregate(
            classified(sanctioned_chain_graph), sanctioned_chain_graph.edges, "Client C"
        ))

        assert nodes["Holding B"].final_risk_score == 100
        assert nodes["Holding B"].risk_category == RiskCategory.PROHIBITED
        assert nodes["Holding B"].final_risk_reasons is None
        assert nodes["Alpha A"].final_risk_score == 100

    def test_unrelated_island_not_affected_by_client(self, isolated_client_graph):
        """Test island nodes get their own display scores."""
        nodes = by_id(RiskAggregator().aggregate(
            classified(isolated_client_graph), isolated_client_graph.edges, "Client D"
        ))

        assert nodes["Island Corp"].final_risk_score == 100
        assert nodes["Island Owner"].final_risk_score == 100

    def test_monotonic_and_thresholds(self):
        """Test final >= base and categories follow thresholds for every node."""
        graph = RawGraph(
            nodes=[
                make_node("Client"),
                make_node("Mid Co", jurisdiction="cyprus"),
                make_node("Top Person", NodeType.PERSON),
                make_node("Director Dan", NodeType.PERSON),
            ],
            edges=[owns("Mid Co", "Client"), owns("Top Person", "Mid Co"), directs("Director Dan", "Client")],
            pep_list={"Director Dan"},
        )
        expected = {100: "Prohibited", 75: "High", 50: "Medium", 0: "Low"}

        for node in RiskAggregator().aggregate(classified(graph), graph.edges, "Client"):
            assert node.final_risk_score >= node.base_risk
            floor = max(t for t in expected if node.final_risk_score >= t)
            assert node.risk_category.value == expected[floor]


class TestClientNotFound:
    """Test the missing client error."""

    def test_raises(self, sanctioned_chain_graph):
        with pytest.raises(ClientNotFoundError) as exc_info:
            RiskAggregator().aggregate(classified(sanctioned_chain_graph), sanctioned_chain_graph.edges, "Nobody")

        assert exc_info.value.client_id == "Nobody"
