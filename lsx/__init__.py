"""
lsx - a directory listing utility.
"""

__version__ = "0.1.0"
