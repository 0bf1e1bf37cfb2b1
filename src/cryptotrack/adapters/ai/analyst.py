# src/cryptotrack/adapters/ai/analyst.py
"""
Market Analyst - AI Analysis and Price Predictions

This module asks a hosted language model for a short market summary of a
coin and for a structured 24h price prediction. It talks to any
OpenAI-compatible chat-completions endpoint; the default configuration
points at Gemini's OpenAI-compatible API.

Neither call raises to the caller:
- get_market_analysis always resolves to human-readable text
- get_price_prediction resolves to a PricePrediction or None

Files that USE this module:
- cryptotrack.application.analysis_service (runs requests per view)
- cryptotrack.app (builds the analyst from settings)
- tests.test_analyst (unit tests)

Files that this module USES:
- cryptotrack.config (API key, base URL, model and timeout)
- cryptotrack.domain.models (Coin)
"""
import asyncio
import json
import logging
from functools import partial
from typing import Any, Optional

from openai import OpenAI
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from cryptotrack.config import settings
from cryptotrack.domain.models import Coin

log = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = (
    "AI Analysis unavailable: AI_API_KEY is missing. Check environment configuration."
)
EMPTY_ANALYSIS_MESSAGE = "No insights generated. Try again."


class PricePrediction(BaseModel):
    """Structured 24h prediction returned by the model."""

    model_config = ConfigDict(populate_by_name=True)

    sentiment: str
    confidence: float = Field(ge=0, le=100)
    prediction_range: str = Field(alias="predictionRange")
    reasoning: str


PREDICTION_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "sentiment": {
            "type": "string",
            "description": "Short sentiment label: Bullish, Bearish, or Neutral",
        },
        "confidence": {
            "type": "number",
            "description": "Confidence percentage (0-100)",
        },
        "predictionRange": {
            "type": "string",
            "description": "A predicted price range for the next 24 hours (e.g. '$63,500 - $65,200')",
        },
        "reasoning": {
            "type": "string",
            "description": "A concise, single-sentence explanation for the prediction",
        },
    },
    "required": ["sentiment", "confidence", "predictionRange", "reasoning"],
    "additionalProperties": False,
}


def _usd(value: float) -> str:
    if abs(value) >= 1:
        return f"{value:,.2f}"
    return f"{value:.4f}"


def build_analysis_prompt(coin: Coin) -> str:
    return f"""Act as a senior cryptocurrency market analyst.
Analyze the following real-time data for {coin.name} ({coin.symbol.upper()}):

- Current Price: ${_usd(coin.current_price)}
- 24h Change: {coin.price_change_percentage_24h:.2f}%
- 7-Day Trend Direction: {coin.trend}
- Market Cap: ${coin.market_cap:,.0f}

Provide a sophisticated, concise 3-sentence market summary:
1. First sentence: Assess the current market sentiment (Bullish/Bearish/Neutral) based on the 24h change and 7-day trend.
2. Second sentence: Highlight a key technical observation or momentum indicator implied by the data.
3. Third sentence: Provide a brief outlook or key price level to watch.

Do not use markdown formatting like bold or headers. Keep it conversational but professional."""


def build_prediction_prompt(coin: Coin) -> str:
    momentum = "Positive" if coin.price_change_percentage_24h > 0 else "Negative"
    return f"""As a quantitative crypto analyst, predict the next 24-hour price movement for {coin.name} ({coin.symbol.upper()}).
Current Data:
- Price: ${_usd(coin.current_price)}
- 24h Volume: ${coin.market_cap * 0.05:,.0f}
- Recent Trend: {momentum} momentum.

Based on this metadata and market patterns, provide a structured prediction in JSON format."""


def _strip_code_fence(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        if text.rstrip().endswith("```"):
            text = text.rstrip()[:-3]
    return text.strip()


def parse_prediction(text: Optional[str]) -> Optional[PricePrediction]:
    """
    Parse a JSON prediction reply.

    Returns:
        PricePrediction, or None for empty, non-JSON or schema-violating replies
    """
    if not text or not text.strip():
        return None
    try:
        data = json.loads(_strip_code_fence(text))
        return PricePrediction.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as e:
        log.warning("Discarding malformed prediction reply: %s", e)
        return None


class MarketAnalyst:
    """
    Client for AI market commentary on a single coin.

    When no API key is configured the client is disabled and both calls
    return their fallbacks without touching the network.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[Any] = None,
    ):
        """
        Args:
            api_key: API key; None reads settings.ai_api_key, "" disables the client
            base_url: OpenAI-compatible endpoint (defaults to settings.ai_base_url)
            model: Model identifier (defaults to settings.ai_model)
            timeout: Request timeout in seconds (defaults to settings.http_timeout_seconds)
            client: Pre-built OpenAI-style client, mainly for tests
        """
        self.api_key = settings.ai_api_key if api_key is None else api_key
        self.base_url = base_url or settings.ai_base_url
        self.model = model or settings.ai_model
        self.timeout = timeout or settings.http_timeout_seconds

        if client is not None:
            self.client = client
        elif not self.api_key:
            log.warning("AI API key not configured - analysis and predictions will be disabled")
            self.client = None
        else:
            self.client = OpenAI(api_key=self.api_key, base_url=self.base_url, timeout=self.timeout)
            log.info("AI analyst initialized with base_url=%s, model=%s", self.base_url, self.model)

    @property
    def enabled(self) -> bool:
        return self.client is not None

    def _complete(self, prompt: str, **extra: Any) -> Optional[str]:
        completion = self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            **extra,
        )
        return completion.choices[0].message.content

    async def _complete_async(self, prompt: str, **extra: Any) -> Optional[str]:
        # The OpenAI client is blocking; keep it off the event loop
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(self._complete, prompt, **extra))

    async def get_market_analysis(self, coin: Coin) -> str:
        """
        Three-sentence market summary for a coin.

        Returns:
            The model's text, or a fallback message when the key is missing,
            the reply is empty or the call fails
        """
        if not self.enabled:
            log.debug("AI API not configured, skipping analysis for %s", coin.id)
            return MISSING_KEY_MESSAGE

        prompt = build_analysis_prompt(coin)
        try:
            log.info("Requesting market analysis for %s (model=%s)", coin.id, self.model)
            text = await self._complete_async(prompt)
        except Exception as e:
            log.error("Market analysis request failed for %s: %s", coin.id, e, exc_info=True)
            return f"AI Analysis Error: {e}"

        if not text or not text.strip():
            log.warning("Model returned empty analysis for %s", coin.id)
            return EMPTY_ANALYSIS_MESSAGE
        return text.strip()

    async def get_price_prediction(self, coin: Coin) -> Optional[PricePrediction]:
        """
        Structured 24h prediction for a coin.

        Returns:
            PricePrediction, or None on missing key, failed call or unparseable reply
        """
        if not self.enabled:
            log.debug("AI API not configured, skipping prediction for %s", coin.id)
            return None

        prompt = build_prediction_prompt(coin)
        try:
            log.info("Requesting price prediction for %s (model=%s)", coin.id, self.model)
            text = await self._complete_async(
                prompt,
                response_format={
                    "type": "json_schema",
                    "json_schema": {
                        "name": "price_prediction",
                        "schema": PREDICTION_SCHEMA,
                        "strict": True,
                    },
                },
            )
        except Exception as e:
            log.error("Price prediction request failed for %s: %s", coin.id, e, exc_info=True)
            return None

        return parse_prediction(text)

    def test_api(self) -> tuple[bool, str]:
        """
        Synchronous health check.

        Returns:
            Tuple of (success, response or error text)
        """
        if not self.enabled:
            return (False, "API key not configured")
        try:
            response = self._complete("Reply with the single word OK.")
        except Exception as e:
            log.error("AI API health check failed: %s", e, exc_info=True)
            return (False, f"API error: {e}")
        if not response:
            return (False, "Empty response from API")
        return (True, response.strip())
