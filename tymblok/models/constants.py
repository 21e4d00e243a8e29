"""Constants for Tymblok.

This module centralizes the magic numbers and default values used throughout the application.
"""

from datetime import time


# Recurrence defaults
DEFAULT_RECURRENCE_INTERVAL = 1
DEFAULT_NEXT_OCCURRENCE_COUNT = 10

# Runaway-prevention ceilings for occurrence generation
GENERATION_HORIZON_YEARS = 2  # generate_occurrences never looks past today + 2 years
MAX_NEXT_OCCURRENCE_ITERATIONS = 1000  # stepping iterations allowed in generate_next_occurrences

# Block defaults
DEFAULT_DURATION_MINUTES = 30

# Blocks generated from recurring inbox items
INBOX_BLOCK_START_TIME = time(9, 0)
INBOX_BLOCK_DURATION_MINUTES = 30
