"""
Reverse IP append gateway.

Authenticates callers, forwards IP lookups to the enrichment provider, and
returns normalized contact records.
"""

__version__ = "0.1.0"
