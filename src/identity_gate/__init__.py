"""Identity Gate - domain-gated account lifecycle service"""

__version__ = "1.0.0"
