"""
SkipGenie: attendance tracking and projection against a 75% minimum.
"""

__version__ = "0.1.0"
