"""Constants for groovesmith.

This package contains three sets of constants:

- ``groovesmith.constants`` (this module) - the tick clock shared by every generator
- ``groovesmith.constants.gm_drums`` - logical drum lanes and their General MIDI pitches
- ``groovesmith.constants.velocity`` - MIDI velocity bounds and defaults

Every pattern is laid out on a 16th-note step grid. One step is 24 ticks, so
a 4/4 bar is 16 steps or 384 ticks. The exported MIDI file uses 96 ticks per
quarter note, which makes the internal tick values convert 1:1.
"""

# Grid resolution

TICKS_PER_STEP = 24
STEPS_PER_BAR = 16
STEPS_PER_BEAT = 4
TICKS_PER_BEAT = TICKS_PER_STEP * STEPS_PER_BEAT
TICKS_PER_BAR = TICKS_PER_STEP * STEPS_PER_BAR

# Note values in ticks

THIRTYSECOND_TICKS = 12
SIXTEENTH_TRIPLET_TICKS = 16
SIXTEENTH_TICKS = 24
EIGHTH_TRIPLET_TICKS = 32
EIGHTH_TICKS = 48
QUARTER_TICKS = 96

# Shortest note any generator or edit may leave behind
MIN_LENGTH_TICKS = 12

# Longest note a flip edit may grow a note to (six steps)
MAX_FLIP_LENGTH_TICKS = 6 * TICKS_PER_STEP

# Export resolution (ticks per quarter note in the written MIDI file)
EXPORT_TICKS_PER_BEAT = 96

# Bar count limits accepted by every generator
MIN_BARS = 1
MAX_BARS = 16

BAR_CHOICES = (1, 2, 4, 8, 16)

# Seed value that requests an automatically derived seed
AUTO_SEED = -1
