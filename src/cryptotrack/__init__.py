# src/cryptotrack/__init__.py
"""
CryptoTrack - Simulated Crypto Portfolio Tracker

A chat-driven crypto portfolio tracker that simulates live coin prices,
records mock buy/sell transactions, tracks favorites and display currency,
and asks a hosted language model for market analysis and price predictions.
"""

__version__ = "1.0.0"
