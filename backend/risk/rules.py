"""
Risk Rules
Immutable lookup tables used by the classifier and category functions.
"""
from dataclasses import dataclass, field

from core.schemas import RiskCategory


# Ordered highest first; the first threshold a score reaches wins
DEFAULT_THRESHOLDS: tuple[tuple[RiskCategory, int], ...] = (
    (RiskCategory.PROHIBITED, 100),
    (RiskCategory.HIGH, 75),
    (RiskCategory.MEDIUM, 50),
    (RiskCategory.LOW, 0),
)

DEFAULT_HIGH_RISK_JURISDICTIONS = frozenset({"bvi", "panama", "cyprus", "malta"})

RISK_LEVELS: dict[RiskCategory, dict] = {
    RiskCategory.PROHIBITED: {"score": 100, "color": "#d7263d"},
    RiskCategory.HIGH: {"score": 75, "color": "#f46a25"},
    RiskCategory.MEDIUM: {"score": 50, "color": "#fdbb2d"},
    RiskCategory.LOW: {"score": 0, "color": "#adefbb"},
}


@dataclass(frozen=True)
class RiskRules:
    """Jurisdiction set, category thresholds and the structural override floor."""
    high_risk_jurisdictions: frozenset[str] = field(default_factory=lambda: DEFAULT_HIGH_RISK_JURISDICTIONS)
    thresholds: tuple[tuple[RiskCategory, int], ...] = DEFAULT_THRESHOLDS
    structural_floor: int = 90

    def __post_init__(self):
        object.__setattr__(
            self, "high_risk_jurisdictions", frozenset(j.lower() for j in self.high_risk_jurisdictions)
        )

    def is_high_risk_jurisdiction(self, jurisdiction: str) -> bool:
        return jurisdiction.lower() in self.high_risk_jurisdictions


DEFAULT_RULES = RiskRules()


def get_risk_category(score: int, rules: RiskRules = DEFAULT_RULES) -> RiskCategory:
    """Map a score to its category using the rule set's thresholds."""
    for category, minimum in rules.thresholds:
        if score >= minimum:
            return category
    return RiskCategory.LOW


def get_risk_color(score: int, rules: RiskRules = DEFAULT_RULES) -> str:
    return RISK_LEVELS[get_risk_category(score, rules)]["color"]
