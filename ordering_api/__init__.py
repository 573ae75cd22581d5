"""
                Food Ordering API

REST backend for customer registration and login, menu browsing,
order placement and order summaries.

Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
