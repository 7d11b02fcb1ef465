"""Core business logic layer.

Subpackages:
- parsing: plan upload decoding, validation and normalization
- reporting: progress aggregation and dashboard views
"""
__all__ = ["parsing", "reporting"]
