"""Pydantic Schemas: tool argument contracts, structured content and JSON-RPC envelopes.

Invariants:
    - Schemas validate at the system boundary (tool arguments, POST bodies)
    - One argument model per tool; adding a tool never edits another tool's model
"""
