"""Sound-generation backend boundary.

Instruments never generate audio themselves.  They ask a ``Backend`` for
primitives (oscillator, noise source, filter) and write automation to the
primitives' control sockets: an immediate ``set_immediate(value, time_ms)`` or a
``ramp_linear_to(value, time_ms)`` that reaches the value at an absolute time.
Times are milliseconds on the backend clock.

``AutomationBackend`` is the in-memory implementation.  It records every
command, which makes it the backend for dry runs and tests.  See
``surferrosa.osc`` for a backend that forwards commands to a synthesis engine.
"""

import dataclasses
import logging
import time
import typing

import surferrosa.waveforms


logger = logging.getLogger(__name__)


class ControlSocket (typing.Protocol):

	"""An addressable parameter that accepts timed writes."""

	def set_immediate (self, value: float, time_ms: float) -> None:
		...

	def ramp_linear_to (self, value: float, time_ms: float) -> None:
		...


class Clock (typing.Protocol):

	"""A monotonic time source, in seconds."""

	def now (self) -> float:
		...


@typing.runtime_checkable
class Primitive (typing.Protocol):

	"""A sound-generation node owned by the backend."""

	active: bool

	def start (self) -> None:
		...

	def stop (self, time_ms: typing.Optional[float] = None) -> None:
		...

	def plug_into (self, target: typing.Any) -> typing.Optional["Primitive"]:
		...

	def input (self) -> typing.Any:
		...

	def frequency_socket (self) -> typing.Optional[ControlSocket]:
		...

	def gain_socket (self) -> typing.Optional[ControlSocket]:
		...


class Backend (typing.Protocol):

	"""Creates primitives that share one clock and one output."""

	clock: Clock
	realtime: bool

	def oscillator (self, waveform: surferrosa.waveforms.Waveform, frequency: float, gain: float) -> Primitive:
		...

	def noise (self, kind: typing.Optional[str], gain: float) -> Primitive:
		...

	def filter (self, kind: typing.Optional[str], frequency: float, gain: float) -> Primitive:
		...

	def destination (self) -> typing.Any:
		...

	def close (self) -> None:
		...


class MonotonicClock:

	"""Seconds elapsed since the clock was created."""

	def __init__ (self) -> None:

		self._origin = time.monotonic()


	def now (self) -> float:

		return time.monotonic() - self._origin


class ManualClock:

	"""A clock that only moves when told to."""

	def __init__ (self, start: float = 0.0) -> None:

		self.current = start


	def now (self) -> float:

		return self.current


	def advance (self, seconds: float) -> None:

		self.current += seconds


# ─── In-memory backend ───────────────────────────────────────────────────────


@dataclasses.dataclass
class AutomationEvent:

	"""One recorded socket write."""

	command: str						# 'set' or 'ramp'
	value: float
	time_ms: float


class RecordingSocket:

	"""A control socket that keeps every write it receives."""

	def __init__ (self, name: str, value: float = 0.0) -> None:

		self.name = name
		self.value = value
		self.events: typing.List[AutomationEvent] = []


	def __repr__ (self) -> str:
		return f"RecordingSocket({self.name!r})"


	def set_immediate (self, value: float, time_ms: float) -> None:

		self.events.append(AutomationEvent("set", value, time_ms))


	def ramp_linear_to (self, value: float, time_ms: float) -> None:

		self.events.append(AutomationEvent("ramp", value, time_ms))


class RecordedPrimitive:

	"""
	A primitive that tracks its lifecycle and connections.

	Inactive primitives (a noise source or filter without a type) expose no
	sockets and refuse connections.
	"""

	def __init__ (self, name: str, active: bool = True, frequency: typing.Optional[float] = None, gain: typing.Optional[float] = None, **settings: typing.Any) -> None:

		self.name = name
		self.active = active
		self.settings = settings
		self.sockets: typing.Dict[str, RecordingSocket] = {}

		if frequency is not None:
			self.sockets["frequency"] = RecordingSocket(f"{name}.frequency", frequency)

		if gain is not None:
			self.sockets["gain"] = RecordingSocket(f"{name}.gain", gain)

		self.started = False
		self.start_count = 0
		self.stop_times: typing.List[typing.Optional[float]] = []
		self.outputs: typing.List[typing.Any] = []


	def __repr__ (self) -> str:
		return f"RecordedPrimitive({self.name!r}, active={self.active})"


	def start (self) -> None:

		if not self.active:
			return

		self.started = True
		self.start_count += 1


	def stop (self, time_ms: typing.Optional[float] = None) -> None:

		if not self.active:
			return

		self.started = False
		self.stop_times.append(time_ms)


	def plug_into (self, target: typing.Any) -> typing.Optional["RecordedPrimitive"]:

		if not self.active:
			return None

		self.outputs.append(target)
		return self


	def input (self) -> "RecordedPrimitive":

		return self


	def frequency_socket (self) -> typing.Optional[RecordingSocket]:

		return self.sockets.get("frequency") if self.active else None


	def gain_socket (self) -> typing.Optional[RecordingSocket]:

		return self.sockets.get("gain") if self.active else None


class AutomationBackend:

	"""
	Backend that records primitives and automation instead of producing sound.
	"""

	def __init__ (self, clock: typing.Optional[Clock] = None, realtime: bool = True) -> None:

		"""
		Parameters:
			clock: Time source; defaults to a ``MonotonicClock``.
			realtime: When False, instruments do not wait for a schedule to
				finish before returning.
		"""

		self.clock: Clock = clock if clock is not None else MonotonicClock()
		self.realtime = realtime
		self.primitives: typing.List[RecordedPrimitive] = []
		self._destination = RecordedPrimitive("destination")
		self.closed = False


	def _add (self, primitive: RecordedPrimitive) -> RecordedPrimitive:

		self.primitives.append(primitive)
		return primitive


	def oscillator (self, waveform: surferrosa.waveforms.Waveform, frequency: float, gain: float) -> RecordedPrimitive:

		return self._add(RecordedPrimitive(f"oscillator-{len(self.primitives)}", frequency=frequency, gain=gain, waveform=waveform))


	def noise (self, kind: typing.Optional[str], gain: float) -> RecordedPrimitive:

		return self._add(RecordedPrimitive(f"noise-{len(self.primitives)}", active=kind is not None, gain=gain, kind=kind))


	def filter (self, kind: typing.Optional[str], frequency: float, gain: float) -> RecordedPrimitive:

		return self._add(RecordedPrimitive(f"filter-{len(self.primitives)}", active=kind is not None, frequency=frequency, gain=gain, kind=kind))


	def destination (self) -> RecordedPrimitive:

		return self._destination


	def close (self) -> None:

		self.closed = True


	def summary (self) -> typing.List[str]:

		"""One line per socket that received automation."""

		lines = []

		for primitive in self.primitives:
			for socket in primitive.sockets.values():
				if socket.events:
					last = socket.events[-1]
					lines.append(f"{socket.name}: {len(socket.events)} events, last at {last.time_ms:.1f} ms")

		return lines
