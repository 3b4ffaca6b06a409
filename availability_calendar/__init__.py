"""
Availability calendar event model.

Merges a per-day availability feed (available / booked / unavailable) into
booking stays and unavailability blocks, and keeps the loaded range of days
consistent as the calendar window grows.
"""

__version__ = "1.0.0"
