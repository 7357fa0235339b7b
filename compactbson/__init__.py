"""Compact typed binary documents: values, encoding, decoding, printing and a demo command."""

__version__ = "0.1.0"
__all__ = ["value", "codec", "printer", "cli"]