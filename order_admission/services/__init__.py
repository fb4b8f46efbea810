"""Services Layer: async orchestration of the admission procedure.

Invariants:
    - Services reach storage only through core.repository_protocols
"""
