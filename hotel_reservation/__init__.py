"""
Консольная система бронирования номеров в отеле.
"""

__version__ = "0.1.0"
