"""
Span providers backed by third-party tracing libraries
"""

from .opentelemetry import HAS_OPENTELEMETRY, opentelemetry_span

__all__ = [
    "HAS_OPENTELEMETRY",
    "opentelemetry_span",
]
