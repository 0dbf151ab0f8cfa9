"""
Scheduler Configuration for Task Reminders

Defines sweep cadence, timezone and the local tick cadence.
"""
import os

# How often the server sweep runs (in minutes)
SWEEP_INTERVAL_MINUTES = 15

# Fixed timezone for the sweep: "today" and active hours are computed here
SWEEP_TIMEZONE = os.getenv("TIMEZONE", "America/Phoenix")

# Local client loop cadence (in seconds)
LOCAL_TICK_SECONDS = 60
LOCAL_INITIAL_DELAY_SECONDS = 3
