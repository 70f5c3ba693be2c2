"""Ingestion layer.

This package turns provider-native payloads into normalized
:class:`pydriven.models.PointOfInterest` sequences.
"""

__all__: list[str] = []
