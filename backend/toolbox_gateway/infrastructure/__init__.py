"""Infrastructure Layer: logging, connection channels and background scheduling.

Invariants:
    - Infrastructure never imports from services/ or api/
"""
