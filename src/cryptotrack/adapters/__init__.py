# src/cryptotrack/adapters/__init__.py
"""
Adapters Layer - External Interfaces

This package contains all adapters for external systems:
- AI (hosted language model)
- Telegram (chat front-end)
- Persistence (storage)
- Formatting (output)
"""

__all__ = []
