"""
Inventory Kernel - IT asset inventory store

An in-memory, single-writer state-transition engine with:
- Immutable per-version state snapshots
- Cross-entity license seat reconciliation
- Append-only audit history per entity
- Injected clock and id generation for deterministic replay
"""

__version__ = "0.1.0"
