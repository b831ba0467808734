"""Envelopes: normalized control curves mapped onto a note's time window.

An envelope is an ordered list of ``(t, v)`` points with ``t`` running from 0
to 1 across a note.  It can be given three ways:

    Envelope([[0, 0], [0.5, 1], [1, 0]])   # explicit points
    Envelope("plucked-string")             # a named shape
    Envelope("damp(2)*0.5")                # exponential decay, alpha=2, beta=0.5

Available named shapes: ``bowed-string``, ``plucked-string``, ``drum-kick``,
``drum-hihat`` and ``10``.  ``damp`` is the only parametric function.

Descriptors are decoded once, at construction, into an ``EnvelopeSpec``.
Unknown names or functions raise ``ConfigurationError``.
"""

import dataclasses
import logging
import math
import re
import typing

import surferrosa.errors


logger = logging.getLogger(__name__)


EnvelopePoint = typing.Tuple[float, float]


@dataclasses.dataclass(frozen=True)
class ScheduleSegment:

	"""
	One ramp instruction: reach ``value`` by ``start_ms + ramp_ms``.
	"""

	start_ms: float
	ramp_ms: float
	value: float


@dataclasses.dataclass(frozen=True)
class Named:

	name: str


@dataclasses.dataclass(frozen=True)
class Damp:

	alpha: float
	beta: float = 1.0


@dataclasses.dataclass(frozen=True)
class Explicit:

	points: typing.Tuple[EnvelopePoint, ...]


EnvelopeSpec = typing.Union[Named, Damp, Explicit]


NAMED_ENVELOPES: typing.Dict[str, typing.List[EnvelopePoint]] = {
	# Slow swell to the middle of the note, then a soft release.
	"bowed-string": [
		(0.0, 0.2),
		(0.1, 0.7),
		(0.5, 1.0),
		(0.8, 0.7),
		(1.0, 0.1),
	],
	# Sharp pluck and a long decay.
	"plucked-string": [
		(0.0, 0.0),
		(0.05, 1.0),
		(0.8, 0.2),
		(1.0, 0.0),
	],
	"drum-kick": [
		(0.0, 0.0),
		(0.01, 1.0),
		(1.0, 0.0),
	],
	"drum-hihat": [
		(0.0, 0.0),
		(0.01, 1.0),
		(0.1, 0.1),
		(0.2, 0.01),
		(1.0, 0.0),
	],
	"10": [
		(0.0, 0.0),
		(0.01, 1.0),
		(1.0, 0.0),
	],
}

DAMP_STEPS = 4

_FUNCTION_PATTERN = re.compile(r"(.+)\(([.\d]+)\)(?:\*([.\d]+))?")


def _parse_factor (text: typing.Optional[str], descriptor: str) -> float:

	if not text:
		return 1.0

	try:
		value = float(text)
	except ValueError:
		raise surferrosa.errors.ConfigurationError(f"Malformed number {text!r} in envelope {descriptor!r}") from None

	# Zero factors fall back to 1.
	return value or 1.0


def parse_descriptor (descriptor: str) -> EnvelopeSpec:

	"""
	Decode ``name`` or ``function(alpha)[*beta]`` into an EnvelopeSpec.
	"""

	descriptor = descriptor.strip()
	match = _FUNCTION_PATTERN.fullmatch(descriptor)

	if match is None:

		if descriptor not in NAMED_ENVELOPES:
			available = ", ".join(f'"{name}"' for name in sorted(NAMED_ENVELOPES))
			raise surferrosa.errors.ConfigurationError(f"Unknown envelope {descriptor!r}. Available envelopes: {available}")

		return Named(descriptor)

	function, alpha, beta = match.groups()

	if function != "damp":
		raise surferrosa.errors.ConfigurationError(f"Unknown envelope function {function!r} in {descriptor!r}")

	return Damp(alpha=_parse_factor(alpha, descriptor), beta=_parse_factor(beta, descriptor))


def to_spec (envelope: typing.Any) -> EnvelopeSpec:

	"""
	Decode any accepted envelope literal into an EnvelopeSpec.
	"""

	if isinstance(envelope, (Named, Damp, Explicit)):
		return envelope

	if isinstance(envelope, str):
		return parse_descriptor(envelope)

	try:
		points = tuple((float(t), float(v)) for t, v in envelope)
	except (TypeError, ValueError):
		raise surferrosa.errors.ConfigurationError(f"Envelope points must be (time, value) pairs, got {envelope!r}") from None

	return Explicit(points)


def damp_points (alpha: float, beta: float = 1.0, steps: int = DAMP_STEPS) -> typing.List[EnvelopePoint]:

	"""
	Exponential decay: a near-instant attack to ``beta``, then ``beta * exp(-alpha * i)``
	at ``i / steps``, ending at zero.
	"""

	points: typing.List[EnvelopePoint] = [(0.0, 0.0), (0.01, beta)]

	for i in range(1, steps + 1):
		value = math.exp(-alpha * i) if i < steps else 0.0
		points.append((i / steps, value * beta))

	return points


def resolve_points (spec: EnvelopeSpec) -> typing.List[EnvelopePoint]:

	if isinstance(spec, Named):
		return list(NAMED_ENVELOPES[spec.name])

	if isinstance(spec, Damp):
		return damp_points(spec.alpha, spec.beta)

	return list(spec.points)


class Envelope:

	"""
	A curve of (normalized time, value) points that can be laid over a note.
	"""

	def __init__ (self, envelope: typing.Any, default: typing.Iterable[EnvelopePoint] = ()) -> None:

		"""
		Decode ``envelope``.  Explicit point lists that turn out empty use ``default`` instead.
		"""

		self.spec = to_spec(envelope)

		points = resolve_points(self.spec)

		if not points:
			logger.warning("Envelope has zero length - using default")
			points = [(float(t), float(v)) for t, v in default]

		if not points:
			raise surferrosa.errors.ConfigurationError("Envelope has no points")

		self.points: typing.Tuple[EnvelopePoint, ...] = tuple(points)


	def __repr__ (self) -> str:
		return f"Envelope({self.spec!r})"


	def length (self) -> int:

		return len(self.points)


	def reduce (self, start_ms: float, window_ms: float, master_value: float = 1.0, zero_first: bool = False, zero_last: bool = False) -> typing.List[ScheduleSegment]:

		"""
		Lay the curve over a window starting at ``start_ms`` and lasting ``window_ms``.

		Every segment shares ``start_ms``; point ``(t, v)`` becomes a ramp that
		reaches ``v * master_value`` after ``t * window_ms``.

		Parameters:
			zero_first: Force the first value to zero, to avoid a click where
				the note begins.
			zero_last: Force the last value to zero, to avoid a click where
				the note ends.

		Zeroing needs at least three points and is ignored otherwise.
		"""

		last = self.length() - 1

		if self.length() < 3:
			zero_first = False
			zero_last = False

		segments: typing.List[ScheduleSegment] = []

		for i, (t, v) in enumerate(self.points):

			if zero_first and i == 0:
				v = 0.0
			elif zero_last and i == last:
				v = 0.0

			segments.append(ScheduleSegment(start_ms=start_ms, ramp_ms=t * window_ms, value=v * master_value))

		return segments
