"""
Quote Tool Package

Internal pricing and invoice generator for a creative agency.
Turns service quantities, extra fees and a discount into an itemized quote,
then renders it as a shareable text invoice or image.
"""

__version__ = "1.0.0"
