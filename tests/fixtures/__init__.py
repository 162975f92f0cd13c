"""
Test fixtures for deterministic testing.

This module provides:
- events: StressEvent / FinanceEvent factories with sequential ids
- seed: write events straight into a store
"""

from .events import OWNER, expense, income, seed, stress

__all__ = ["OWNER", "expense", "income", "seed", "stress"]
