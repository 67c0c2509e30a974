"""Client risk engine: classification, cycle detection, propagation."""

from .engine import RiskEngine, analyze_client_risk, get_risk_engine
from .exceptions import ClientNotFoundError, RiskEngineError
from .graph_utils import detect_cycles, find_ancestors
from .rules import RiskRules, DEFAULT_RULES, get_risk_category, get_risk_color


__all__ = [
    "RiskEngine",
    "analyze_client_risk",
    "get_risk_engine",
    "ClientNotFoundError",
    "RiskEngineError",
    "detect_cycles",
    "find_ancestors",
    "RiskRules",
    "DEFAULT_RULES",
    "get_risk_category",
    "get_risk_color",
]
