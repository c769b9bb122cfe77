"""Character sheet manager: derivation engine, reconciler and stores."""

__version__ = "0.1.0"
