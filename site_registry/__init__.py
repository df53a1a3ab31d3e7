"""
Site registry service.

Tracks infrastructure sites, their status and power-source
configuration behind a REST API.
"""
__version__ = "1.0.0"
