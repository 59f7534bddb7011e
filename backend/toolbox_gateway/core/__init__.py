"""Core Layer: pure gateway logic, no network IO, no awaits.

Invariants:
    - No module in core/ imports from services/, api/ or infrastructure/
    - Every state mutation completes without a suspension point
    - Time is read only through an injected Clock
"""
