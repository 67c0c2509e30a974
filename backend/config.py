"""
Ownership Risk Analyzer - Configuration
"""
from pydantic_settings import BaseSettings
from pydantic import computed_field
from typing import Optional
import json

from risk.rules import RiskRules, DEFAULT_THRESHOLDS


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Ownership Risk Analyzer"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # API
    API_PREFIX: str = "/api"
    # Raw CORS_ORIGINS as string (comma-separated or JSON array)
    CORS_ORIGINS: str = "http://localhost:3000,http://127.0.0.1:3000"

    @computed_field
    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS from various formats (JSON array or comma-separated)."""
        v = self.CORS_ORIGINS
        if not v:
            return ["http://localhost:3000", "http://127.0.0.1:3000"]
        # Try JSON first
        try:
            parsed = json.loads(v)
            if isinstance(parsed, list):
                return parsed
        except json.JSONDecodeError:
            pass
        # Fall back to comma-separated
        return [origin.strip() for origin in v.split(",") if origin.strip()]

    # Gemini API (Google AI Studio)
    # Get key from: https://aistudio.google.com/apikey
    GEMINI_API_KEY: Optional[str] = None
    GEMINI_MODEL: str = "gemini-2.5-flash"

    # Rate limiting
    GEMINI_REQUESTS_PER_MINUTE: int = 60
    GEMINI_MAX_RETRIES: int = 3

    # ===== RISK RULES =====
    # Lowercase jurisdiction codes known to the network generator
    ALL_JURISDICTIONS: list[str] = [
        "uk", "usa", "germany", "singapore", "bvi",
        "panama", "switzerland", "cyprus", "malta"
    ]
    HIGH_RISK_JURISDICTIONS: list[str] = ["bvi", "panama", "cyprus", "malta"]

    # Minimum final score for a client inside an ownership cycle
    STRUCTURAL_RISK_FLOOR: int = 90

    # Upper bound on generated graph size
    MAX_GRAPH_NODES: int = 200

    def risk_rules(self) -> RiskRules:
        """Build the immutable rule set handed to the risk engine."""
        return RiskRules(
            high_risk_jurisdictions=frozenset(self.HIGH_RISK_JURISDICTIONS),
            thresholds=DEFAULT_THRESHOLDS,
            structural_floor=self.STRUCTURAL_RISK_FLOOR,
        )

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Allow extra env vars that aren't defined in Settings


settings = Settings()
