"""Six-voice chord spreads used by ``Melody.chord()``.

Each tuning is a list of halfstep offsets from the root, spanning two octaves.
"""

import typing


CHORD_TUNINGS: typing.Dict[str, typing.List[int]] = {
	"maj":   [0, 7, 12, 16, 19, 24],
	"min":   [0, 7, 12, 15, 19, 24],
	"sus2":  [0, 7, 12, 14, 19, 24],
	"sus4":  [0, 7, 12, 17, 19, 24],
	"power": [0, 7, 12, 19, 24, 31],
}

BLUE_MONDAY_BASS: typing.List[int] = [24, 0, 12, 0]
FUNKY_BASS: typing.List[int] = [0, 12, 0, 12]
