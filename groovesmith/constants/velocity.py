"""MIDI velocity constants.

Velocity is the MIDI attack strength (1-127 for a sounding note). These
constants define the bounds the generators clamp to and sensible defaults.
"""

# Primary defaults
DEFAULT_VELOCITY = 100

# MIDI standard range for a sounding note
MIN_VELOCITY = 1
MAX_VELOCITY = 127

# Flip edits keep velocities inside this window
FLIP_MIN_VELOCITY = 30
FLIP_MAX_VELOCITY = 127

# Roll sub-hits never decay below this
ROLL_MIN_VELOCITY = 40

# Representative velocities for transcribed hits
TRANSCRIBED_KICK_VELOCITY = 115
TRANSCRIBED_SNARE_VELOCITY = 108
TRANSCRIBED_HAT_VELOCITY = 80
