"""Perspectize: content catalogue and perspectives API"""

__version__ = "0.1.0"
