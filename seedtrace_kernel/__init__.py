"""
SeedTrace Kernel

Seed-lot traceability core with:
- Generational levels GO -> G1 -> ... -> R2
- Single-parent lot genealogy (ancestors, descendants, trees)
- Relation mutations guarded by hierarchy and cycle checks
- Consistency reporting and JSON / CSV / Graphviz export
"""

__version__ = "0.1.0"
