"""Pitch-class names mapped to their halfstep distance above A.

The reference pitch (``BASE_FREQUENCY``) is an A, so index 0 is A and the
octave rolls over after G#.  ``REST`` is the pitch class used for silence.
"""

import typing


REST = "0"

HALFSTEP_INDEX: typing.Dict[str, int] = {
	"A":  0,
	"A#": 1,
	"B":  2,
	"C":  3,
	"C#": 4,
	"D":  5,
	"D#": 6,
	"E":  7,
	"F":  8,
	"F#": 9,
	"G":  10,
	"G#": 11,
}
