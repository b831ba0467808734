"""OSC backend: forward primitives and automation to an external synthesis engine.

Every primitive gets an address such as ``/surferrosa/oscillator/1``.  Messages
sent by the backend (times are seconds on the backend clock, which starts at
zero when the backend is created; ``/surferrosa/reset`` marks that moment):

- ``<prefix>/reset``
- ``<primitive>/create <args...>``: oscillator ``<wave> <freq> <gain>``, noise
  ``<kind> <gain>``, filter ``<kind> <freq> <gain>``
- ``<primitive>/wave <imag...>``: harmonic amplitudes for periodic waveforms
- ``<primitive>/start``, ``<primitive>/stop [<time>]``
- ``<primitive>/connect <target address>``
- ``<primitive>/<param>/set <value> <time>``
- ``<primitive>/<param>/ramp <value> <time>``

Inactive primitives (noise or filter without a type) send nothing.
"""

import itertools
import logging
import typing

import pythonosc.udp_client

import surferrosa.backend
import surferrosa.constants
import surferrosa.waveforms


logger = logging.getLogger(__name__)


class OscSocket:

	"""A control socket whose writes become OSC messages."""

	def __init__ (self, backend: "OscBackend", address: str) -> None:

		self._backend = backend
		self.address = address


	def set_immediate (self, value: float, time_ms: float) -> None:

		self._backend.send(f"{self.address}/set", float(value), time_ms / surferrosa.constants.MS_PER_SECOND)


	def ramp_linear_to (self, value: float, time_ms: float) -> None:

		self._backend.send(f"{self.address}/ramp", float(value), time_ms / surferrosa.constants.MS_PER_SECOND)


class OscPrimitive:

	"""A primitive living in the remote engine."""

	def __init__ (self, backend: "OscBackend", address: str, active: bool = True, sockets: typing.Iterable[str] = ()) -> None:

		self._backend = backend
		self.address = address
		self.active = active
		self._sockets = {name: OscSocket(backend, f"{address}/{name}") for name in sockets}


	def start (self) -> None:

		if self.active:
			self._backend.send(f"{self.address}/start")


	def stop (self, time_ms: typing.Optional[float] = None) -> None:

		if not self.active:
			return

		if time_ms is None:
			self._backend.send(f"{self.address}/stop")
		else:
			self._backend.send(f"{self.address}/stop", time_ms / surferrosa.constants.MS_PER_SECOND)


	def plug_into (self, target: typing.Any) -> typing.Optional["OscPrimitive"]:

		if not self.active:
			return None

		self._backend.send(f"{self.address}/connect", target.address)
		return self


	def input (self) -> "OscPrimitive":

		return self


	def frequency_socket (self) -> typing.Optional[OscSocket]:

		return self._sockets.get("frequency") if self.active else None


	def gain_socket (self) -> typing.Optional[OscSocket]:

		return self._sockets.get("gain") if self.active else None


class OscBackend:

	"""Backend that drives a remote engine over UDP."""

	def __init__ (
		self,
		host: str = "127.0.0.1",
		port: int = 57120,
		prefix: str = "/surferrosa",
		clock: typing.Optional[surferrosa.backend.Clock] = None,
		client: typing.Optional[typing.Any] = None
	) -> None:

		"""
		Parameters:
			host: Engine host.
			port: Engine UDP port (57120 is SuperCollider's default).
			prefix: Address prefix for every message.
			clock: Time source; defaults to a ``MonotonicClock`` started now.
			client: An object with ``send_message(address, args)``; a
				``SimpleUDPClient`` for ``host``/``port`` by default.
		"""

		self.prefix = prefix
		self.clock: surferrosa.backend.Clock = clock if clock is not None else surferrosa.backend.MonotonicClock()
		self.realtime = True

		self._client = client if client is not None else pythonosc.udp_client.SimpleUDPClient(host, port)
		self._ids = itertools.count(1)
		self._destination = OscPrimitive(self, f"{prefix}/destination")

		self.send(f"{prefix}/reset")

		logger.info(f"OSC backend sending to {host}:{port} under {prefix}")


	def send (self, address: str, *args: typing.Any) -> None:

		"""Send an OSC message."""

		try:
			self._client.send_message(address, list(args))
		except OSError as e:
			logger.warning(f"OSC send error: {e}")


	def _create (self, kind: str, active: bool, sockets: typing.Iterable[str], *args: typing.Any) -> OscPrimitive:

		primitive = OscPrimitive(self, f"{self.prefix}/{kind}/{next(self._ids)}", active=active, sockets=sockets)

		if active:
			self.send(f"{primitive.address}/create", *args)

		return primitive


	def oscillator (self, waveform: surferrosa.waveforms.Waveform, frequency: float, gain: float) -> OscPrimitive:

		primitive = self._create("oscillator", True, ("frequency", "gain"), waveform.builtin or "periodic", float(frequency), float(gain))

		if waveform.is_periodic:
			self.send(f"{primitive.address}/wave", *waveform.imag)

		return primitive


	def noise (self, kind: typing.Optional[str], gain: float) -> OscPrimitive:

		return self._create("noise", kind is not None, ("gain",), kind, float(gain))


	def filter (self, kind: typing.Optional[str], frequency: float, gain: float) -> OscPrimitive:

		return self._create("filter", kind is not None, ("frequency", "gain"), kind, float(frequency), float(gain))


	def destination (self) -> OscPrimitive:

		return self._destination


	def close (self) -> None:

		self.send(f"{self.prefix}/close")
		logger.info("OSC backend closed")
