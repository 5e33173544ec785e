"""
                Mumma Tiffin

City-scoped meal ordering backend: public menu and notifications,
customer orders and addresses, and city-bound administrators who
manage the menu and move orders through their statuses.

Author: Mumma Tiffin Team
Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
__author__ = "Mumma Tiffin Team"
