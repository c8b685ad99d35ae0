"""
CLI MODULE
==========

Command-line interface for the Hindsight memory bank.

Usage:
    python -m cli status
    python -m cli search "breakfast preferences" --limit 3
    python -m cli reflect "What does the user usually eat?"
"""

from .main import main, cli_status, cli_search, cli_reflect

__all__ = [
    'main',
    'cli_status',
    'cli_search',
    'cli_reflect',
]
