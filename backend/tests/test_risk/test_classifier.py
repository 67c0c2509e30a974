"""
Tests for the base risk classifier.
"""
import pytest

from core.schemas import RawGraph, NodeType
from risk.classifier import BaseRiskClassifier
from risk.rules import RiskRules
from tests.graph_builders import make_node


class TestClassify:
    """Test single-node classification."""

    @pytest.fixture
    def classifier(self):
        return BaseRiskClassifier()

    def test_clean_node(self, classifier):
        """Test that an unlisted node in a normal jurisdiction has no risk."""
        assert classifier.classify(make_node("Clean Co"), set(), set()) == (0, [])

    def test_sanctions_match(self, classifier):
        """Test sanctions scoring."""
        assert classifier.classify(make_node("Bad Co"), {"Bad Co"}, set()) == (100, ["Sanctions Match"])

    def test_pep_match(self, classifier):
        """Test PEP scoring."""
        node = make_node("Jane Smith", NodeType.PERSON)
        assert classifier.classify(node, set(), {"Jane Smith"}) == (75, ["PEP Match"])

    def test_sanctions_beats_pep(self, classifier):
        """Test that sanctions and PEP are mutually exclusive."""
        score, reasons = classifier.classify(make_node("Both"), {"Both"}, {"Both"})

        assert score == 100
        assert reasons == ["Sanctions Match"]

    def test_high_risk_jurisdiction(self, classifier):
        """Test jurisdiction raises a clean node to 50."""
        node = make_node("Offshore Ltd.", jurisdiction="bvi")
        assert classifier.classify(node, set(), set()) == (50, ["Jurisdiction: BVI"])

    def test_jurisdiction_reason_after_watchlist_reason(self, classifier):
        """Test reason order and that the score is not lowered."""
        node = make_node("Offshore PEP", jurisdiction="panama")
        score, reasons = classifier.classify(node, set(), {"Offshore PEP"})

        assert score == 75
        assert reasons == ["PEP Match", "Jurisdiction: PANAMA"]

    def test_alternate_jurisdiction_set(self):
        """Test that the jurisdiction set comes from the rules."""
        classifier = BaseRiskClassifier(RiskRules(high_risk_jurisdictions=frozenset({"uk"})))

        assert classifier.classify(make_node("London Ltd."), set(), set()) == (50, ["Jurisdiction: UK"])
        assert classifier.classify(make_node("Tortola Ltd.", jurisdiction="bvi"), set(), set()) == (0, [])

    def test_uppercase_jurisdiction_set(self):
        """Test rule sets given in uppercase still match lowercase codes."""
        rules = RiskRules(high_risk_jurisdictions=frozenset({"BVI"}))

        assert rules.high_risk_jurisdictions == frozenset({"bvi"})
        assert BaseRiskClassifier(rules).classify(
            make_node("Tortola Ltd.", jurisdiction="bvi"), set(), set()
        ) == (50, ["Jurisdiction: BVI"])

    def test_uppercase_node_jurisdiction(self, classifier):
        """Test a node given an uppercase code is scored like the lowercase one."""
        node = make_node("Offshore Ltd.", jurisdiction="BVI")

        assert node.jurisdiction == "bvi"
        assert classifier.classify(node, set(), set()) == (50, ["Jurisdiction: BVI"])


class TestClassifyAll:
    """Test whole-graph classification."""

    def test_preserves_order_and_input(self):
        """Test node order is kept and input nodes are not mutated."""
        graph = RawGraph(
            nodes=[make_node("B"), make_node("A", jurisdiction="cyprus"), make_node("C")],
            edges=[],
            sanctions_list={"C"},
        )
        analyzed = BaseRiskClassifier().classify_all(graph)

        assert [n.id for n in analyzed] == ["B", "A", "C"]
        assert [n.base_risk for n in analyzed] == [0, 50, 100]
        assert not hasattr(graph.nodes[0], "base_risk")
