"""
Availability & Scheduling Engine.

Models each team member's working-hours calendar, resolves whether a date
or time window is available, manages one-off and recurring unavailable
slots, applies range updates and schedules meetings.
"""

__version__ = "0.1.0"
