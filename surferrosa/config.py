"""Song files.

A song file is YAML describing instruments, melodies and what to play:

    instruments:
      lead:
        ms_per_beat: 250
        osc: {type: violin}
        envelopes: {osc.gain: bowed-string}
    melodies:
      theme:
        notes:
          - {note: A, duration: 1}
          - {note: C, oct: 1, duration: 2}
        transforms:
          - [repeat, [2, 1]]
          - [transpose, [0, 7, 12]]
          - [prolong_last, 1.5]
    play: {lead: theme}
    loop: 2

Each transform is a method name, a ``[name, arg, ...]`` list or a
``{name: arg}`` mapping.
"""

import dataclasses
import functools
import logging
import os
import typing

import yaml

import surferrosa.ensemble
import surferrosa.errors
import surferrosa.instrument
import surferrosa.melody


logger = logging.getLogger(__name__)


MELODY_TRANSFORMS = frozenset({
	"repeat",
	"loop",
	"transpose",
	"temp",
	"arpeggio",
	"chord",
	"prolong_last",
	"blue_monday_bass",
	"funky_bass",
})


@dataclasses.dataclass
class Song:

	"""What a song file asks to play."""

	play: typing.Dict[str, str]
	loop: int = 1


def load_config (config_path: str) -> dict:

	"""
	Load configuration from a YAML file.
	"""

	if not os.path.exists(config_path):
		logger.warning(f"Config file {config_path} not found. Using defaults.")
		return {}

	with open(config_path, 'r') as f:
		return yaml.safe_load(f) or {}


def _split_step (step: typing.Any) -> typing.Tuple[str, typing.List[typing.Any]]:

	if isinstance(step, str):
		return step, []

	if isinstance(step, (list, tuple)) and step and isinstance(step[0], str):
		return step[0], list(step[1:])

	if isinstance(step, dict) and len(step) == 1:
		name, arg = next(iter(step.items()))
		return name, [] if arg is None else [arg]

	raise surferrosa.errors.ConfigurationError(f"Malformed melody transform {step!r}")


def apply_transforms (melody: surferrosa.melody.Melody, transforms: typing.Iterable[typing.Any]) -> surferrosa.melody.Melody:

	"""
	Apply a list of transform steps in order.
	"""

	for step in transforms:

		name, args = _split_step(step)

		if name not in MELODY_TRANSFORMS:
			available = ", ".join(sorted(MELODY_TRANSFORMS))
			raise surferrosa.errors.ConfigurationError(f"Unknown melody transform {name!r}. Available transforms: {available}")

		melody = getattr(melody, name)(*args)

	return melody


def load_song (config_path: str, ensemble: surferrosa.ensemble.Surferrosa) -> Song:

	"""
	Register a song file's instruments and melodies with ``ensemble``.
	"""

	config = load_config(config_path)

	for name, settings in (config.get("instruments") or {}).items():
		ensemble.band.make(surferrosa.instrument.InstrumentConfig.from_dict(settings or {})).save(name)

	for name, entry in (config.get("melodies") or {}).items():

		entry = entry or {}

		ensemble.song.make(entry.get("notes") or [], strict=entry.get("strict", False)).change(
			functools.partial(apply_transforms, transforms=entry.get("transforms") or [])
		).save(name)

	play = {str(instrument): str(melody) for instrument, melody in (config.get("play") or {}).items()}

	return Song(play=play, loop=int(config.get("loop", 1)))
