"""Services Layer: tool executors, capability registry, dispatch and transport glue.

Invariants:
    - Tool routing goes through ToolRegistry (explicit registration, no auto-discovery)
    - The dispatcher is the single boundary where failures become responses
"""
