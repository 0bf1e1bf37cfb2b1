# src/cryptotrack/__main__.py
"""Module entry point: ``python -m cryptotrack``."""

from cryptotrack.app import main

if __name__ == "__main__":
    main()
