"""
                Restaurant Ordering Platform

Multi-tenant restaurant storefront backend: restaurants, menus, weekly
operating hours and open/closed availability.

Version: 1.0.0
"""

__version__ = "1.0.0"
