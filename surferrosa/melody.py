"""Melody algebra: immutable note sequences and their shape-driven transforms.

A ``Melody`` holds ``NoteEvent`` values whose durations are relative to one
beat.  Every operation returns a new ``Melody``, so chains read naturally and
a stored melody can be reused without being disturbed:

    theme = surferrosa.melody.Melody([{"note": "A"}, {"note": "C", "oct": 1}])
    bass = theme.repeat([2, 1]).transpose([0, 12, 0]).loop(4)

Shapes describe how an operation applies per element.  An integer ``repeat``
shape loops the whole melody; a list shape repeats element *i* ``shape[i]``
times.  Misuse (a shape that does not fit the melody, an unknown tuning) logs
a warning and returns the melody unchanged, unless the melody was created with
``strict=True``, in which case the matching ``AuthoringError`` is raised.
"""

import dataclasses
import logging
import typing

import surferrosa.constants.tunings
import surferrosa.errors


logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class NoteEvent:

	"""
	One pitch (or rest) with a duration relative to a beat.
	"""

	pitch_class: str
	halfstep_offset: float = 0
	octave: int = 0
	duration: float = 1.0


NoteLike = typing.Union[NoteEvent, typing.Mapping[str, typing.Any]]

# Short keys accepted in composition literals.
FIELD_ALIASES: typing.Dict[str, str] = {
	"note": "pitch_class",
	"ht": "halfstep_offset",
	"oct": "octave",
}

_NOTE_FIELDS = frozenset(field.name for field in dataclasses.fields(NoteEvent))


def resolve_aliases (item: typing.Mapping[str, typing.Any]) -> typing.Dict[str, typing.Any]:

	"""
	Rename short keys to field names and drop keys whose value is None.
	"""

	return {FIELD_ALIASES.get(key, key): value for key, value in item.items() if value is not None}


def normalize_note (note: NoteLike) -> NoteEvent:

	"""
	Build a NoteEvent from a literal, filling missing fields with their defaults.
	"""

	if isinstance(note, NoteEvent):
		return note

	fields = {key: value for key, value in resolve_aliases(note).items() if key in _NOTE_FIELDS}

	if "pitch_class" not in fields:
		raise surferrosa.errors.ConfigurationError(f"Note {dict(note)!r} has no pitch class")

	# YAML reads the rest symbol as an integer.
	fields["pitch_class"] = str(fields["pitch_class"])

	return NoteEvent(**fields)


def transpose_note (note: NoteEvent, shift: float) -> NoteEvent:

	"""Move a note by a number of halfsteps."""

	return dataclasses.replace(note, halfstep_offset=note.halfstep_offset + shift)


def temp_note (note: NoteEvent, factor: float) -> NoteEvent:

	"""Scale a note's duration by a factor."""

	return dataclasses.replace(note, duration=note.duration * factor)


# ─── Shapes ──────────────────────────────────────────────────────────────────


@dataclasses.dataclass(frozen=True)
class Count:

	"""Repeat the whole melody n times."""

	n: int


@dataclasses.dataclass(frozen=True)
class PerElementCounts:

	"""Repeat element i counts[i] times."""

	counts: typing.Tuple[int, ...]


RepeatShape = typing.Union[Count, PerElementCounts]


@dataclasses.dataclass(frozen=True)
class Uniform:

	"""Pass the same value to the transform for every element."""

	value: typing.Any


@dataclasses.dataclass(frozen=True)
class PerElement:

	"""Pass values[i] to the transform for element i."""

	values: typing.Tuple[typing.Any, ...]


TransformShape = typing.Union[Uniform, PerElement]


def _is_number (value: typing.Any) -> bool:

	return isinstance(value, (int, float)) and not isinstance(value, bool)


def _as_count (value: typing.Any) -> typing.Optional[int]:

	"""
	Return value as a non-negative integer count, or None when it is not one.
	"""

	if not _is_number(value) or value < 0:
		return None

	if isinstance(value, float):
		return int(value) if value.is_integer() else None

	return value


def parse_repeat_shape (shape: typing.Any, length: int) -> RepeatShape:

	"""
	Decode a repeat shape for a melody of the given length.

	An integer becomes ``Count``.  A list becomes ``PerElementCounts``; a list
	holding a single count is broadcast to every element first.

	Raises ``ShapeMismatchError`` when the shape does not fit.
	"""

	if isinstance(shape, (Count, PerElementCounts)):
		shape = shape.n if isinstance(shape, Count) else list(shape.counts)

	if not isinstance(shape, (list, tuple)):

		count = _as_count(shape)

		if count is None:
			raise surferrosa.errors.ShapeMismatchError(f"repeat: invalid arguments {shape!r}")

		return Count(count)

	counts = [_as_count(value) for value in shape]

	if any(count is None for count in counts):
		raise surferrosa.errors.ShapeMismatchError(f"repeat: counts must be non-negative integers, got {list(shape)!r}")

	if len(counts) == 1 and length > 1:
		counts = counts * length

	if len(counts) != length:
		raise surferrosa.errors.ShapeMismatchError(f"repeat: invalid shape length, {len(counts)} instead of {length}")

	return PerElementCounts(tuple(typing.cast(typing.List[int], counts)))


def parse_transform_shape (shape: typing.Any, length: int, label: str = "transform") -> TransformShape:

	"""
	Decode a transform shape: a number applies everywhere, a list applies positionally.

	Raises ``ShapeMismatchError`` when the shape does not fit.
	"""

	if isinstance(shape, (Uniform, PerElement)):
		shape = shape.value if isinstance(shape, Uniform) else list(shape.values)

	if _is_number(shape):
		return Uniform(shape)

	if isinstance(shape, (list, tuple)):

		if len(shape) != length:
			raise surferrosa.errors.ShapeMismatchError(f"{label}: invalid shape length, {len(shape)} instead of {length}")

		return PerElement(tuple(shape))

	raise surferrosa.errors.ShapeMismatchError(f"{label}: invalid arguments {shape!r}")


# ─── Melody ──────────────────────────────────────────────────────────────────


class Melody:

	"""
	An ordered, immutable sequence of NoteEvents with a chainable transform algebra.
	"""

	def __init__ (self, notes: typing.Iterable[NoteLike] = (), strict: bool = False) -> None:

		"""
		Normalize the given notes.  With ``strict=True`` misuse raises instead of warning.
		"""

		self._notes: typing.Tuple[NoteEvent, ...] = tuple(normalize_note(note) for note in notes)
		self.strict = strict


	@property
	def notes (self) -> typing.Tuple[NoteEvent, ...]:
		return self._notes


	def __len__ (self) -> int:
		return len(self._notes)


	def __iter__ (self) -> typing.Iterator[NoteEvent]:
		return iter(self._notes)


	def __eq__ (self, other: object) -> bool:

		if not isinstance(other, Melody):
			return NotImplemented

		return self._notes == other._notes


	def __repr__ (self) -> str:
		return f"Melody({list(self._notes)!r})"


	def _derive (self, notes: typing.Iterable[NoteLike]) -> "Melody":

		return Melody(notes, strict=self.strict)


	def _reject (self, error: surferrosa.errors.AuthoringError) -> "Melody":

		"""
		Raise the error in strict mode, otherwise log it and leave the melody as it is.
		"""

		if self.strict:
			raise error

		logger.warning(str(error))
		return self


	def set (self, notes: typing.Iterable[NoteLike]) -> "Melody":

		"""
		Return a melody holding a normalized copy of ``notes``.
		"""

		return self._derive(notes)


	def length (self) -> int:

		return len(self._notes)


	def copy (self) -> typing.List[NoteEvent]:

		"""
		Return the notes as a new list, independent of this melody.
		"""

		return list(self._notes)


	def clone (self) -> "Melody":

		return self._derive(self._notes)


	def total_duration (self) -> float:

		"""Sum of the relative note durations, in beats."""

		return sum(note.duration for note in self._notes)


	def repeat (self, shape: typing.Any, fit_temp: bool = True) -> "Melody":

		"""
		Repeat the melody, or each of its notes, according to ``shape``.

		Parameters:
			shape: An integer N loops the whole melody N times.  A list repeats
				note i ``shape[i]`` times, and each copy lasts ``1 / shape[i]`` of
				the original, so every slot keeps its total duration.  A
				one-element list is applied to every note.
			fit_temp: When looping the whole melody, divide every duration by N
				so the result lasts as long as the original.
		"""

		try:
			parsed = parse_repeat_shape(shape, self.length())
		except surferrosa.errors.ShapeMismatchError as exc:
			return self._reject(exc)

		if isinstance(parsed, Count):

			notes = list(self._notes) * parsed.n

			if fit_temp and parsed.n > 0:
				notes = [temp_note(note, 1 / parsed.n) for note in notes]

			return self._derive(notes)

		notes = []

		for note, count in zip(self._notes, parsed.counts):

			# A zero count drops the note along with its duration.
			if count == 0:
				continue

			notes.extend([temp_note(note, 1 / count)] * count)

		return self._derive(notes)


	def transform (self, shape: typing.Any, transformator: typing.Callable[[NoteEvent, typing.Any], NoteEvent], label: str = "transform") -> "Melody":

		"""
		Apply ``transformator(note, value)`` to every note.

		A numeric shape passes the same value for every note; a list shape must
		match the melody length and is applied positionally.
		"""

		try:
			parsed = parse_transform_shape(shape, self.length(), label)
		except surferrosa.errors.ShapeMismatchError as exc:
			return self._reject(exc)

		if isinstance(parsed, Uniform):
			values: typing.Sequence[typing.Any] = [parsed.value] * self.length()
		else:
			values = parsed.values

		return self._derive(transformator(note, value) for note, value in zip(self._notes, values))


	def transpose (self, shape: typing.Any) -> "Melody":

		"""Shift notes by halfsteps."""

		return self.transform(shape, transpose_note, "transpose")


	def temp (self, shape: typing.Any) -> "Melody":

		"""Multiply note durations."""

		return self.transform(shape, temp_note, "temp")


	def each (self, splitter: typing.Callable[[typing.List["Melody"]], typing.Iterable["Melody"]]) -> "Melody":

		"""
		Split into one-note melodies, pass the list through ``splitter`` and join the result.

		The splitter may reorder, drop or expand the parts; the joined melody
		follows the order it returns.
		"""

		parts = [self._derive([note]) for note in self._notes]
		notes: typing.List[NoteEvent] = []

		for part in splitter(parts):
			notes.extend(part.copy())

		return self._derive(notes)


	def map (self, mapper: typing.Callable[["Melody"], "Melody"]) -> "Melody":

		"""Replace every note with the melody ``mapper`` returns for it."""

		return self.each(lambda parts: [mapper(part) for part in parts])


	def arpeggio (self, offsets: typing.Sequence[float]) -> "Melody":

		"""
		Loop the melody once per offset, then transpose the looped notes positionally.

		The offsets line up with the looped notes, so this spreads a single
		note into an arpeggio.  For longer melodies the transpose shape does
		not fit and only the loop takes effect.
		"""

		offsets = list(offsets)

		return self.repeat(len(offsets)).transpose(offsets)


	def chord (self, tuning: str = "maj") -> "Melody":

		"""
		Arpeggiate through a named six-voice spread (see ``CHORD_TUNINGS``).
		"""

		offsets = surferrosa.constants.tunings.CHORD_TUNINGS.get(tuning)

		if offsets is None:
			return self._reject(surferrosa.errors.AuthoringError(f"chord: invalid tune {tuning!r}"))

		return self.arpeggio(offsets)


	def prolong_last (self, duration: float = 1) -> "Melody":

		"""
		Stretch the last note by ``duration`` and shrink the others to compensate.

		With L unit-length notes, every note but the last is scaled by
		``(L - duration) / (L - 1)``, so the total length stays L.
		"""

		length = self.length()

		if length == 0 or length < duration:
			return self._reject(surferrosa.errors.AuthoringError(f"prolong_last: invalid duration {duration} (max is {length})"))

		if length == 1:
			return self.temp([duration])

		factor = (length - duration) / (length - 1)

		return self.temp([factor] * (length - 1) + [duration])


	def loop (self, n: int) -> "Melody":

		"""Repeat the whole melody n times without shortening it."""

		return self.repeat(n, fit_temp=False)


	def blue_monday_bass (self) -> "Melody":

		return self.arpeggio(surferrosa.constants.tunings.BLUE_MONDAY_BASS)


	def funky_bass (self) -> "Melody":

		return self.arpeggio(surferrosa.constants.tunings.FUNKY_BASS)
