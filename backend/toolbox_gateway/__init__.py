"""AuditToolbox Gateway: streaming tool gateway for AI agent clients.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
