"""
Shared utilities for HRMS.

Common functionality used across contexts:
- Timestamps
- Logger setup
- Pipeline event logging
"""

from hrms.utils.timestamp import compact, now, now_exact

__all__ = ["compact", "now", "now_exact"]
