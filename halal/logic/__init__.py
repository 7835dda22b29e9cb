"""Core business logic layer.

Subpackages:
- classification: rule engine deciding halal / doubtful / haram
- lookup: orchestration of cache, product source and history
- reporting: statistics over history and favorites
"""
__all__ = ["classification", "lookup", "reporting"]
