"""
roomfinder - check hotel room availability and manage reservations.
"""

__version__ = "0.1.0"
