"""Gran Turismo 7 telemetry decoding, UDP client and Salsa20 stream cipher."""

__version__ = "0.1.0"
__all__ = ["cli", "gt7", "salsa20"]