"""Route Modules: one file per endpoint family.

Invariants:
    - Each module defines its own APIRouter
    - Routes never contain gateway logic (delegate to services.gateway)
"""
