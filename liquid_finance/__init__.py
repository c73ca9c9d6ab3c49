"""
Liquid Finance - Core Package

The calculation core of a personal-finance assistant: ledger totals,
needs/wants/savings budgeting, wealth projection, investment growth and
take-home pay estimation.

DESIGN PRINCIPLES:
1. The engine is pure - every figure is a function of explicit inputs
2. The clock is injected, never read inside the engine
3. Invalid input fails loudly, it is never silently patched
4. State lives in the shell, not in the calculations
5. Storage and advice backends are swappable
"""

__version__ = "1.0.0"
__author__ = "Liquid Finance Team"
