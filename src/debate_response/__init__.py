"""
AI debate response video service.
"""

__version__ = "1.0.0"
