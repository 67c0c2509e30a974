"""
Tests for visualization payloads.
"""
from core.schemas import RawGraph
from risk import analyze_client_risk
from visualization.graph_payload import build_force_graph, build_ownership_tree, VIRTUAL_ROOT_ID
from tests.graph_builders import make_node, owns, directs


def analyzed(graph: RawGraph, client_id: str):
    return analyze_client_risk(graph, client_id).graph


class TestForceGraph:
    """Test force-directed payload."""

    def test_nodes_and_links(self, sanctioned_chain_graph):
        payload = build_force_graph(analyzed(sanctioned_chain_graph, "Client C"), "Client C")

        nodes = {n["id"]: n for n in payload["nodes"]}
        assert nodes["Client C"]["is_client"] is True
        assert nodes["Client C"]["radius"] > nodes["Holding B"]["radius"]
        assert nodes["Client C"]["color"] == "#d7263d"
        assert {link["label"] for link in payload["links"]} == {"OWNS 50%"}
        assert not any(link["is_circular"] for link in payload["links"])

    def test_circular_links_flagged(self):
        """Test only edges on a cycle are flagged."""
        graph = RawGraph(
            nodes=[make_node("X"), make_node("Y"), make_node("Z"), make_node("P")],
            edges=[owns("X", "Y"), owns("Y", "X"), owns("Z", "X"), directs("P", "X")],
        )
        payload = build_force_graph(analyzed(graph, "X"), "X")
        flags = {(l["source"], l["target"]): l["is_circular"] for l in payload["links"]}

        assert flags == {("X", "Y"): True, ("Y", "X"): True, ("Z", "X"): False, ("P", "X"): False}

    def test_zero_percentage_label(self):
        """Test a 0% holding is labelled without a percentage."""
        graph = RawGraph(nodes=[make_node("A"), make_node("B")], edges=[owns("A", "B", percentage=0)])
        payload = build_force_graph(analyzed(graph, "B"), "B")

        assert payload["links"][0]["label"] == "OWNS"

    def test_director_label(self, director_graph):
        payload = build_force_graph(analyzed(director_graph, "Client E"), "Client E")

        assert {link["label"] for link in payload["links"]} == {"DIRECTOR"}


class TestOwnershipTree:
    """Test hierarchical payload."""

    def test_single_root(self, sanctioned_chain_graph):
        """Test a chain becomes a single nested branch from the top owner."""
        tree = build_ownership_tree(analyzed(sanctioned_chain_graph, "Client C"), "Client C")

        assert tree["id"] == "Alpha A"
        assert tree["children"][0]["id"] == "Holding B"
        assert tree["children"][0]["children"][0]["id"] == "Client C"
        assert tree["children"][0]["children"][0]["is_client"] is True

    def test_virtual_root_for_many_roots(self, director_graph):
        """Test unrelated roots are gathered under a virtual root."""
        tree = build_ownership_tree(analyzed(director_graph, "Client E"), "Client E")

        assert tree["id"] == VIRTUAL_ROOT_ID
        assert {child["id"] for child in tree["children"]} == {"Client E", "Paula One", "Peter Two"}

    def test_cycle_terminates(self):
        """Test a cycle below a root is expanded once per branch."""
        graph = RawGraph(
            nodes=[make_node("Top"), make_node("A"), make_node("B")],
            edges=[owns("Top", "A"), owns("A", "B"), owns("B", "A")],
        )
        tree = build_ownership_tree(analyzed(graph, "A"), "A")

        assert tree["id"] == "Top"
        a = tree["children"][0]
        assert a["id"] == "A"
        assert a["children"][0]["id"] == "B"
        assert a["children"][0]["children"] == []
