"""
Gemini API Client
Uses the google-genai package with rate limiting, retry with backoff and an
interaction log of every prompt and response.
"""
import asyncio
import time
from typing import Optional
from datetime import datetime, timezone
import hashlib
from loguru import logger

from config import settings


RETRYABLE_PHRASES = [
    "quota", "rate limit", "resource exhausted", "429",
    "too many requests", "exceeded", "503", "unavailable",
    "overloaded", "500", "internal server error", "temporarily"
]


class RateLimiter:
    """Simple rate limiter with exponential backoff."""

    def __init__(self, requests_per_minute: int = 15, max_retries: int = 3):
        self.requests_per_minute = requests_per_minute
        self.max_retries = max_retries
        self.request_times: list[float] = []
        self.backoff_until: float = 0
        self.consecutive_failures = 0

    async def wait_if_needed(self):
        """Wait if rate limit is exceeded or in backoff period."""
        now = time.time()

        if now < self.backoff_until:
            wait_time = self.backoff_until - now
            logger.warning(f"[RateLimiter] In backoff period, waiting {wait_time:.1f}s")
            await asyncio.sleep(wait_time)
            now = time.time()

        # Clean old requests (older than 1 minute)
        self.request_times = [t for t in self.request_times if now - t < 60]

        if len(self.request_times) >= self.requests_per_minute:
            oldest = min(self.request_times)
            wait_time = 60 - (now - oldest) + 1
            if wait_time > 0:
                logger.info(f"[RateLimiter] Rate limit reached, waiting {wait_time:.1f}s")
                await asyncio.sleep(wait_time)

        self.request_times.append(time.time())

    def record_failure(self) -> int:
        """Record a failure and calculate backoff."""
        self.consecutive_failures += 1
        # Exponential backoff: 5s, 10s, 20s, 40s, etc.
        backoff_seconds = min(5 * (2 ** (self.consecutive_failures - 1)), 120)
        self.backoff_until = time.time() + backoff_seconds
        logger.warning(f"[RateLimiter] Failure #{self.consecutive_failures}, backing off for {backoff_seconds}s")
        return backoff_seconds

    def record_success(self):
        self.consecutive_failures = 0


class GeminiClient:
    """
    Wrapper for the Gemini API.
    All prompts and responses are kept in an interaction log for review.
    """

    def __init__(self, api_key: Optional[str] = None):
        self.api_key = api_key or settings.GEMINI_API_KEY
        self.model_name = settings.GEMINI_MODEL
        self.client = None
        self.genai_types = None
        self.rate_limiter = RateLimiter(
            requests_per_minute=settings.GEMINI_REQUESTS_PER_MINUTE,
            max_retries=settings.GEMINI_MAX_RETRIES
        )
        self.interaction_log: list[dict] = []

        if not self.api_key:
            logger.warning("[GeminiClient.__init__] Gemini API key not configured. AI explanations disabled.")
        else:
            self._initialize_client()

    @property
    def is_configured(self) -> bool:
        return self.client is not None

    def _initialize_client(self):
        """Initialize the google-genai client."""
        try:
            from google import genai
            from google.genai import types

            self.client = genai.Client(api_key=self.api_key)
            self.genai_types = types
            logger.info(f"[GeminiClient] google-genai client initialized with model: {self.model_name}")
        except Exception as e:
            logger.error(f"[GeminiClient] Failed to initialize google-genai client: {e}")
            self.client = None

    async def generate(
        self,
        prompt: str,
        temperature: float = 0.4,
        max_tokens: int = 2048,
        purpose: str = "general"
    ) -> dict:
        """
        Generate content with rate limiting and retries.

        Returns:
            Dict with "text" (None on failure), "error" and the log entry
        """
        logger.info(f"[generate] Starting generation for purpose: {purpose}")

        if not self.is_configured:
            return {
                "text": None,
                "error": "Gemini API not configured",
                "audit": self._create_log_entry(prompt, None, purpose, error="API not configured")
            }

        timestamp = datetime.now(timezone.utc)
        last_error = None

        for attempt in range(self.rate_limiter.max_retries + 1):
            try:
                await self.rate_limiter.wait_if_needed()
                logger.info(f"[generate] Calling Gemini API (attempt {attempt + 1}/{self.rate_limiter.max_retries + 1})")

                response_text = await asyncio.to_thread(
                    self._generate_content, prompt, temperature, max_tokens
                )
                if not response_text or not response_text.strip():
                    raise ValueError("Gemini returned empty response")

                self.rate_limiter.record_success()
                entry = self._create_log_entry(prompt, response_text, purpose, timestamp=timestamp)
                self.interaction_log.append(entry)
                logger.info(f"[generate] Received response: {len(response_text)} chars")
                return {"text": response_text, "error": None, "audit": entry}

            except Exception as e:
                last_error = str(e)
                if any(phrase in last_error.lower() for phrase in RETRYABLE_PHRASES):
                    backoff_time = self.rate_limiter.record_failure()
                    if attempt < self.rate_limiter.max_retries:
                        logger.info(f"[generate] Retryable error, waiting {backoff_time}s: {last_error}")
                        await asyncio.sleep(backoff_time)
                        continue
                    logger.error("[generate] Max retries exceeded")
                else:
                    logger.error(f"[generate] Gemini API error (non-retryable): {e}")
                break

        error_message = f"API Error after retries: {last_error}"
        entry = self._create_log_entry(prompt, None, purpose, error=error_message, timestamp=timestamp)
        self.interaction_log.append(entry)
        return {"text": None, "error": error_message, "audit": entry}

    def _generate_content(self, prompt: str, temperature: float, max_tokens: int) -> Optional[str]:
        response = self.client.models.generate_content(
            model=self.model_name,
            contents=prompt,
            config=self.genai_types.GenerateContentConfig(
                temperature=temperature,
                max_output_tokens=max_tokens,
            )
        )
        if response.text is None and getattr(response, "candidates", None):
            logger.warning(f"[_generate_content] Response blocked, reason: {response.candidates[0].finish_reason}")
        return response.text

    def _create_log_entry(
        self,
        prompt: str,
        response: Optional[str],
        purpose: str,
        timestamp: Optional[datetime] = None,
        error: Optional[str] = None
    ) -> dict:
        return {
            "timestamp": (timestamp or datetime.now(timezone.utc)).isoformat(),
            "purpose": purpose,
            "prompt_hash": hashlib.sha256(prompt.encode()).hexdigest(),
            "prompt_preview": prompt[:500] + "..." if len(prompt) > 500 else prompt,
            "response_hash": hashlib.sha256(response.encode()).hexdigest() if response else None,
            "response_length": len(response) if response else 0,
            "error": error,
            "model": self.model_name
        }

    def get_interaction_log(self) -> list[dict]:
        return self.interaction_log
