"""
                Restodesk

Multi-tenant restaurant ordering backend: each restaurant owns its menu
and orders, customers order through a shareable restaurant link, and a
superadmin provisions new restaurants.

Author: Khalil_Bannouri
Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
__author__ = "Khalil_Bannouri"
