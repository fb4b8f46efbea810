"""Infrastructure Layer: database sessions, SQL stores and structured logging.

Invariants:
    - Infrastructure never decides admission rules (core/ does)
    - SQLAlchemy exceptions mapped to core errors before leaving this layer
"""
