"""
Commodity Kernel

Commodity-aware exact arithmetic for financial values:
- Plain numbers, single-commodity amounts and multi-commodity balances
- Display precision learned per commodity, never lowered
- Exact rational quantities; rounding only at display and comparison time
- Display and exact variants of every equality, ordering and sign test
"""

__version__ = "0.1.0"
