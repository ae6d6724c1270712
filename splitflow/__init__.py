"""
splitflow - Shared Purchase Ledger

Tracks purchases shared among a small group of accounts and derives, for
each account, an exact balance and a smoothed daily spending flow per tag.

DESIGN PRINCIPLES:
1. Money is integer cents, never floats
2. The ledger is the single source of truth; everything else is replayed
3. Broken invariants fail loudly, nothing is silently repaired
4. Every change to the ledger is audited
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "splitflow Team"
