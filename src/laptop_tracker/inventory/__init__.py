"""
Device inventory module.

Canonical device records, vendor normalization, age classification and the
notified-set store.
"""

__all__ = ["models", "normalizer", "age", "store"]
