"""
Entry point for running Multiplay as a module.

Usage:
    python -m src.multiplay play
    python -m src.multiplay stats
    python -m src.multiplay --help
"""
from .multiplay_cli import main

if __name__ == "__main__":
    main()
