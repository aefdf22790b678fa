"""
Shared utilities for texsnap.

Common functionality used across contexts:
- Logger setup with provenance
- Timestamps for log directories
"""

from texsnap.utils.timestamp import now

__all__ = ["now"]
