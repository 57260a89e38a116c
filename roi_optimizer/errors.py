"""
The single error kind raised by the ROI and recommendation engines.

Normal edge cases (zero cost, zero revenue, empty sales lists) are defined
results, never errors. ``InvalidInputError`` is reserved for inputs that
would otherwise leak NaN/Infinity or negative money into a report.
"""

from __future__ import annotations


class InvalidInputError(ValueError):
    """Raised when an input record has an invalid shape or non-finite value."""
