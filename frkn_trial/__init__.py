"""
FRKN Trial - trial activation gateway
"""

__version__ = "1.0.0"
