"""tradelog — analytics engine for a retail trading journal."""

__version__ = "0.1.0"
