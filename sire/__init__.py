"""
SIRE package
============

This package contains the Storm Impact Ranking Engine (SIRE).

- The CLI entry point is in `sire/cli.py`.
- The core pipeline (normalize, aggregate, rank) is in `sire/engine.py`.
- Dataset loading is in `sire/loader.py`.
"""

__version__ = '0.3.1'
