"""phrasebook - locale-aware message resolution and binding."""

__version__ = "0.1.0"
