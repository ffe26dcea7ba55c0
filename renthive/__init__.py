"""
RentHive: property rental listings with accounts, favorites and photo uploads.
"""

__version__ = "1.0.0"
