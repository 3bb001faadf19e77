"""Mactime Forensic - MACB timeline generation from forensic bodyfiles."""

__version__ = "1.0.0"
