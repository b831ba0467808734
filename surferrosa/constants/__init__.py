"""Constants for Surferrosa.

- ``surferrosa.constants`` - timing and tuning values shared by the scheduler and instruments
- ``surferrosa.constants.pitches`` - pitch-class names and their halfstep index above A
- ``surferrosa.constants.tunings`` - named halfstep offset sets used by ``Melody.chord()``
"""

MS_PER_SECOND = 1000

# Ramps cannot target a true zero on every backend, so silence ramps to this value.
MIN_VALUE = 0.0001

DEFAULT_MS_PER_BEAT = 1000

BASE_FREQUENCY = 440.0
HALFSTEPS_PER_OCTAVE = 12

# Fade applied to the oscillator gain before it is stopped.
RELEASE_MS = 100
