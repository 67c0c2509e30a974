"""Pytest configuration and fixtures."""
import pytest
import sys
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.schemas import RawGraph, NodeType
from risk.rules import RiskRules
from tests.graph_builders import make_node, owns, directs


@pytest.fixture
def rules():
    """Default rule set."""
    return RiskRules()


@pytest.fixture
def sanctioned_chain_graph():
    """Sanctioned A owns B, B owns client C."""
    return RawGraph(
        nodes=[
            make_node("Client C"),
            make_node("Holding B", depth=1),
            make_node("Alpha A", depth=2),
        ],
        edges=[owns("Holding B", "Client C"), owns("Alpha A", "Holding B")],
        sanctions_list={"Alpha A"},
    )


@pytest.fixture
def isolated_client_graph():
    """Client D with no incoming edges and an unrelated risky island."""
    return RawGraph(
        nodes=[
            make_node("Client D"),
            make_node("Island Corp", jurisdiction="panama", depth=1),
            make_node("Island Owner", NodeType.PERSON, depth=2),
        ],
        edges=[owns("Island Owner", "Island Corp")],
        sanctions_list={"Island Owner"},
    )


@pytest.fixture
def two_cycle_graph():
    """X owns Y and Y owns X."""
    return RawGraph(
        nodes=[make_node("X Corp"), make_node("Y Corp", depth=1)],
        edges=[owns("X Corp", "Y Corp"), owns("Y Corp", "X Corp")],
    )


@pytest.fixture
def director_graph():
    """Client with two directors: PEP P1 and clean P2."""
    return RawGraph(
        nodes=[
            make_node("Client E"),
            make_node("Paula One", NodeType.PERSON, depth=1),
            make_node("Peter Two", NodeType.PERSON, depth=1),
        ],
        edges=[directs("Paula One", "Client E"), directs("Peter Two", "Client E")],
        pep_list={"Paula One"},
    )
