# src/cryptotrack/adapters/ai/__init__.py
"""
AI Adapters - Hosted Language Model Integration

Market analysis and structured price predictions from an
OpenAI-compatible chat-completions API.
"""

from cryptotrack.adapters.ai.analyst import MarketAnalyst, PricePrediction

__all__ = ["MarketAnalyst", "PricePrediction"]
