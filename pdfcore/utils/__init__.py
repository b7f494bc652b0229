"""
Shared utilities for PDFCore.

Common functionality used across contexts:
- Inline CSS helpers
- Logger setup
- Timestamps
"""

from pdfcore.utils.timestamp import now

__all__ = ["now"]
