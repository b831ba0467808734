"""Turn a composition into per-parameter automation schedules.

The scheduler walks a normalized composition with a running time cursor.
Each sounding note lays every configured envelope over its window, producing
one block of ``ScheduleSegment`` values per parameter.  Rests advance the
cursor without emitting anything, except a leading rest, which pins the noise
gain to silence so no previous tail carries into it.

Envelope targets:

    "osc.freq"     oscillator frequency, scaled by the note frequency
    "osc.gain"     oscillator gain, scaled by the master gain
    "noise.gain"   noise gain, scaled by the master gain
    "filter.freq"  filter frequency, unscaled
"""

import dataclasses
import logging
import typing

import surferrosa.constants
import surferrosa.constants.pitches
import surferrosa.envelope
import surferrosa.melody


logger = logging.getLogger(__name__)


OSC_FREQ = "osc.freq"
OSC_GAIN = "osc.gain"
NOISE_GAIN = "noise.gain"
FILTER_FREQ = "filter.freq"

ENVELOPE_TARGETS: typing.Tuple[str, ...] = (OSC_FREQ, OSC_GAIN, NOISE_GAIN, FILTER_FREQ)


@dataclasses.dataclass
class CompositionItem:

	"""
	A note ready for scheduling, with durations in milliseconds.
	"""

	pitch_class: str = "A"
	octave: int = 0
	halfstep_offset: float = 0
	duration: float = 0.0
	delay: float = 0.0					# carried with the item, not applied to the cursor
	kind: str = "note"
	is_first: bool = False
	is_last: bool = False


@dataclasses.dataclass
class Schedule:

	"""
	Automation blocks per envelope target and the total length in milliseconds.

	Each block is the result of one envelope reduction; its first segment is
	an immediate set and the rest are ramps.
	"""

	blocks: typing.Dict[str, typing.List[typing.List[surferrosa.envelope.ScheduleSegment]]]
	duration: float


	def segments (self, target: str) -> typing.List[surferrosa.envelope.ScheduleSegment]:

		"""All segments for a target, blocks joined in playback order."""

		return [segment for block in self.blocks.get(target, []) for segment in block]


def note_to_frequency (pitch_class: str, octave: int = 0, halfstep_offset: float = 0, base_frequency: float = surferrosa.constants.BASE_FREQUENCY) -> typing.Optional[float]:

	"""
	Frequency in Hz of a pitch class, 0 for a rest, or None for an unknown name.
	"""

	if pitch_class == surferrosa.constants.pitches.REST:
		return 0.0

	index = surferrosa.constants.pitches.HALFSTEP_INDEX.get(pitch_class)

	if index is None:
		return None

	halfsteps = index + halfstep_offset + octave * surferrosa.constants.HALFSTEPS_PER_OCTAVE

	return 2 ** (halfsteps / surferrosa.constants.HALFSTEPS_PER_OCTAVE) * base_frequency


class Scheduler:

	"""
	Converts compositions to schedules for one set of envelopes and tuning settings.
	"""

	def __init__ (
		self,
		envelopes: typing.Mapping[str, surferrosa.envelope.Envelope],
		ms_per_beat: float = surferrosa.constants.DEFAULT_MS_PER_BEAT,
		base_frequency: float = surferrosa.constants.BASE_FREQUENCY,
		base_octave: int = 0,
		master_gain: float = 1.0
	) -> None:

		"""
		Parameters:
			envelopes: Envelope per target name (see ``ENVELOPE_TARGETS``);
				targets without an envelope are not scheduled.
			ms_per_beat: Length of a duration of 1.0, in milliseconds.
			base_frequency: Frequency of A at octave 0.
			base_octave: Octave added to every note.
			master_gain: Scale applied to the gain envelopes.
		"""

		if ms_per_beat <= 0:
			raise ValueError("ms_per_beat must be positive")

		self.envelopes = dict(envelopes)
		self.ms_per_beat = ms_per_beat
		self.base_frequency = base_frequency
		self.base_octave = base_octave
		self.master_gain = master_gain


	def beats_to_ms (self, beats: float) -> float:

		return beats * self.ms_per_beat


	def normalize_item (self, item: typing.Union[surferrosa.melody.NoteEvent, typing.Mapping[str, typing.Any]]) -> CompositionItem:

		"""
		Fill defaults and convert beat durations to milliseconds.
		"""

		if isinstance(item, surferrosa.melody.NoteEvent):
			fields: typing.Dict[str, typing.Any] = dataclasses.asdict(item)
		else:
			fields = surferrosa.melody.resolve_aliases(item)

		return CompositionItem(
			kind = fields.get("kind", "note"),
			pitch_class = str(fields.get("pitch_class", "A")),
			octave = fields.get("octave", 0),
			halfstep_offset = fields.get("halfstep_offset", 0),
			duration = self.beats_to_ms(fields.get("duration", 1)),
			delay = self.beats_to_ms(fields.get("delay", 0)),
		)


	def normalize_composition (self, composition: typing.Iterable[typing.Any]) -> typing.List[CompositionItem]:

		"""
		Normalize every item and flag the first and last.
		"""

		items = [self.normalize_item(item) for item in composition]

		if items:
			items[0].is_first = True
			items[-1].is_last = True

		return items


	def _reduce (self, target: str, item: CompositionItem, cursor: float, master_value: float = 1.0, zeroing: bool = False) -> typing.Optional[typing.List[surferrosa.envelope.ScheduleSegment]]:

		envelope = self.envelopes.get(target)

		if envelope is None:
			return None

		if zeroing:
			return envelope.reduce(cursor, item.duration, master_value, item.is_first, item.is_last)

		return envelope.reduce(cursor, item.duration, master_value)


	def composition_to_schedule (self, items: typing.Sequence[CompositionItem]) -> Schedule:

		"""
		Lay the envelopes over every sounding item, in order.
		"""

		blocks: typing.Dict[str, typing.List[typing.List[surferrosa.envelope.ScheduleSegment]]] = {target: [] for target in ENVELOPE_TARGETS}

		def emit (target: str, block: typing.Optional[typing.List[surferrosa.envelope.ScheduleSegment]]) -> None:
			if block is not None:
				blocks[target].append(block)

		cursor = 0.0

		for item in items:

			frequency = note_to_frequency(item.pitch_class, item.octave + self.base_octave, item.halfstep_offset, self.base_frequency)

			if frequency is None:
				logger.warning(f"Unknown pitch class {item.pitch_class!r} - treated as a rest")

			if frequency:
				emit(OSC_FREQ, self._reduce(OSC_FREQ, item, cursor, frequency))
				emit(OSC_GAIN, self._reduce(OSC_GAIN, item, cursor, self.master_gain, zeroing=True))
				emit(NOISE_GAIN, self._reduce(NOISE_GAIN, item, cursor, self.master_gain, zeroing=True))
				emit(FILTER_FREQ, self._reduce(FILTER_FREQ, item, cursor))

			elif item.is_first:
				emit(NOISE_GAIN, self._reduce(NOISE_GAIN, item, cursor, 0.0, zeroing=True))

			cursor += item.duration

		logger.debug(
			"Scheduled %d items over %.1f ms: %s",
			len(items),
			cursor,
			", ".join(f"{target}={len(target_blocks)}" for target, target_blocks in blocks.items())
		)

		return Schedule(blocks=blocks, duration=cursor)


	def schedule (self, composition: typing.Iterable[typing.Any]) -> Schedule:

		"""Normalize a composition and build its schedule."""

		return self.composition_to_schedule(self.normalize_composition(composition))
