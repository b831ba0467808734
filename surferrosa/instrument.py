import asyncio
import dataclasses
import logging
import typing

import surferrosa.backend
import surferrosa.constants
import surferrosa.envelope
import surferrosa.errors
import surferrosa.melody
import surferrosa.scheduler
import surferrosa.waveforms


logger = logging.getLogger(__name__)


# Full frequency and gain for the whole note.
FLAT_ENVELOPE: typing.List[typing.List[float]] = [[0, 1], [1, 1]]

DEFAULT_ENVELOPES: typing.Dict[str, typing.List[typing.List[float]]] = {
	surferrosa.scheduler.OSC_FREQ: FLAT_ENVELOPE,
	surferrosa.scheduler.OSC_GAIN: FLAT_ENVELOPE,
	surferrosa.scheduler.NOISE_GAIN: FLAT_ENVELOPE,
}

LFO_TARGETS: typing.Tuple[str, ...] = (
	surferrosa.scheduler.OSC_FREQ,
	surferrosa.scheduler.OSC_GAIN,
	surferrosa.scheduler.FILTER_FREQ,
)

# Keys used by older song files.
CONFIG_ALIASES: typing.Dict[str, str] = {
	"temp": "ms_per_beat",
	"oct": "octave",
	"LFOs": "lfos",
	"masterGain": "master_gain",
}


@dataclasses.dataclass
class InstrumentConfig:

	"""
	Everything needed to build an Instrument.

	Attributes:
		ms_per_beat: Length of a note duration of 1.0, in milliseconds.
		octave: Octave added to every note.
		osc: Oscillator settings: ``type`` (waveform name), ``freq``, ``gain``.
		filter: Filter settings: ``type`` (None disables it), ``freq``, ``gain``.
		noise: Noise settings: ``type`` (None disables it), ``gain``.
		envelopes: Envelope literal per target; merged over ``DEFAULT_ENVELOPES``.
		lfos: LFO settings per target: ``type``, ``n`` (cycles per beat), ``gain``.
		master_gain: Scale applied to gain envelopes and LFO depth.
	"""

	ms_per_beat: float = surferrosa.constants.DEFAULT_MS_PER_BEAT
	octave: int = 0
	osc: typing.Dict[str, typing.Any] = dataclasses.field(default_factory=dict)
	filter: typing.Dict[str, typing.Any] = dataclasses.field(default_factory=dict)
	noise: typing.Dict[str, typing.Any] = dataclasses.field(default_factory=dict)
	envelopes: typing.Dict[str, typing.Any] = dataclasses.field(default_factory=dict)
	lfos: typing.Dict[str, typing.Dict[str, typing.Any]] = dataclasses.field(default_factory=dict)
	master_gain: float = 1.0


	@classmethod
	def from_dict (cls, data: typing.Mapping[str, typing.Any]) -> "InstrumentConfig":

		"""
		Build a config from a plain mapping, such as a section of a song file.
		"""

		known = {field.name for field in dataclasses.fields(cls)}
		fields: typing.Dict[str, typing.Any] = {}

		for key, value in data.items():

			name = CONFIG_ALIASES.get(key, key)

			if name not in known:
				raise surferrosa.errors.ConfigurationError(f"Unknown instrument setting {key!r}")

			if value is not None:
				fields[name] = value

		return cls(**fields)


class Instrument:

	"""
	Owns the backend primitives and envelopes for one voice and plays compositions on them.

	Example::

		backend = surferrosa.backend.AutomationBackend()
		lead = Instrument({"osc": {"type": "violin"}, "envelopes": {"osc.gain": "bowed-string"}}, backend=backend)
		await lead.play(melody)
	"""

	def __init__ (
		self,
		config: typing.Union[InstrumentConfig, typing.Mapping[str, typing.Any], None] = None,
		backend: typing.Optional[surferrosa.backend.Backend] = None,
		**options: typing.Any
	) -> None:

		"""
		Create the primitives and envelopes and wire them together.

		Parameters:
			config: An ``InstrumentConfig`` or a mapping accepted by ``InstrumentConfig.from_dict``.
			backend: Where primitives are created; an ``AutomationBackend`` by default.
			options: Settings merged over ``config``.
		"""

		if isinstance(config, InstrumentConfig):
			config = dataclasses.asdict(config)

		config = InstrumentConfig.from_dict({**(config or {}), **options})

		self.config = config
		self.backend: surferrosa.backend.Backend = backend if backend is not None else surferrosa.backend.AutomationBackend()

		osc = {"type": "sine", "freq": 0, "gain": 1, **config.osc}
		noise = {"type": None, "gain": 1, **config.noise}
		filter_settings = {"type": None, "freq": 220, "gain": 1, **config.filter}

		self.osc = self.backend.oscillator(surferrosa.waveforms.resolve_waveform(osc["type"]), osc["freq"], osc["gain"])
		self.noise = self.backend.noise(noise["type"], noise["gain"])
		self.filter = self.backend.filter(filter_settings["type"], filter_settings["freq"], filter_settings["gain"])

		self.envelopes = self._create_envelopes()
		self.lfos = self._create_lfos()

		self.scheduler = surferrosa.scheduler.Scheduler(
			envelopes = self.envelopes,
			ms_per_beat = config.ms_per_beat,
			base_octave = config.octave,
			master_gain = config.master_gain
		)

		self._connect_lfos()

		destination = self.backend.destination()
		self._connect_in_series([self.osc, self.filter]).plug_into(destination)
		self._connect_in_series([self.noise]).plug_into(destination)

		self.playing = False


	def _create_envelopes (self) -> typing.Dict[str, surferrosa.envelope.Envelope]:

		envelopes: typing.Dict[str, surferrosa.envelope.Envelope] = {}

		for target, literal in {**DEFAULT_ENVELOPES, **self.config.envelopes}.items():

			if target not in surferrosa.scheduler.ENVELOPE_TARGETS:
				logger.warning(f"Envelope target {target!r} is not scheduled - ignored")
				continue

			envelopes[target] = surferrosa.envelope.Envelope(literal, default=DEFAULT_ENVELOPES.get(target, FLAT_ENVELOPE))

		return envelopes


	def _create_lfos (self) -> typing.Dict[str, surferrosa.backend.Primitive]:

		lfos: typing.Dict[str, surferrosa.backend.Primitive] = {}

		for target, params in self.config.lfos.items():

			if target not in LFO_TARGETS:
				raise surferrosa.errors.ConfigurationError(f"Unknown LFO target {target!r}")

			params = params or {}
			waveform = surferrosa.waveforms.resolve_waveform(params.get("type", "sine"))

			# n cycles per beat.
			frequency = params.get("n", 1) * surferrosa.constants.MS_PER_SECOND / self.config.ms_per_beat
			gain = self.config.master_gain * params.get("gain", 1)

			lfos[target] = self.backend.oscillator(waveform, frequency, gain)

		return lfos


	def _target_socket (self, target: str) -> typing.Optional[surferrosa.backend.ControlSocket]:

		if target == surferrosa.scheduler.OSC_FREQ:
			return self.osc.frequency_socket()

		if target == surferrosa.scheduler.OSC_GAIN:
			return self.osc.gain_socket()

		if target == surferrosa.scheduler.NOISE_GAIN:
			return self.noise.gain_socket()

		if target == surferrosa.scheduler.FILTER_FREQ:
			return self.filter.frequency_socket()

		raise surferrosa.errors.ConfigurationError(f"Unknown target {target!r}")


	def _connect_lfos (self) -> None:

		for target, lfo in self.lfos.items():

			socket = self._target_socket(target)

			if socket is None:
				logger.warning(f"LFO target {target!r} is inactive - LFO left unconnected")
				continue

			lfo.plug_into(socket)


	def _connect_in_series (self, series: typing.Sequence[surferrosa.backend.Primitive]) -> surferrosa.backend.Primitive:

		"""
		Plug each active primitive into the next; return the last one in the chain.
		"""

		left = series[0]

		for right in series[1:]:

			if right.active:
				left.plug_into(right.input())
				left = right

		return left


	def current_time_ms (self) -> float:

		return self.backend.clock.now() * surferrosa.constants.MS_PER_SECOND


	@staticmethod
	def set_param_at (socket: typing.Optional[surferrosa.backend.ControlSocket], value: float, start_ms: float, ramp_ms: float, is_first: bool, now_ms: float) -> None:

		"""
		Write one segment: the first of a block is set at its start, the rest ramp to their target.
		"""

		if socket is None:
			return

		if is_first:
			socket.set_immediate(value, now_ms + start_ms)
		else:
			# Ramps cannot land on an exact zero.
			target = value if value != 0 else surferrosa.constants.MIN_VALUE
			socket.ramp_linear_to(target, now_ms + start_ms + ramp_ms)


	def apply_schedule (self, schedule: surferrosa.scheduler.Schedule) -> None:

		"""
		Write every block of the schedule to its socket, relative to the current backend time.
		"""

		now_ms = self.current_time_ms()

		for target, blocks in schedule.blocks.items():

			socket = self._target_socket(target)

			for block in blocks:
				for i, segment in enumerate(block):
					self.set_param_at(socket, segment.value, segment.start_ms, segment.ramp_ms, i == 0, now_ms)


	async def _wait (self, duration_ms: float) -> None:

		if duration_ms > 0 and self.backend.realtime:
			await asyncio.sleep(duration_ms / surferrosa.constants.MS_PER_SECOND)


	async def play_scheduled (self, schedule: surferrosa.scheduler.Schedule) -> "Instrument":

		"""
		Apply a schedule and complete once its duration has elapsed.
		"""

		self.apply_schedule(schedule)
		await self._wait(schedule.duration)

		return self


	def start (self) -> None:

		self.osc.start()
		self.noise.start()

		for lfo in self.lfos.values():
			lfo.start()

		self.playing = True


	def stop (self) -> None:

		"""
		Fade the oscillator out and stop the sound sources.
		"""

		if not self.playing:
			return

		now_ms = self.current_time_ms()
		release_ms = now_ms + surferrosa.constants.RELEASE_MS

		self.set_param_at(self.osc.gain_socket(), 0, 0, surferrosa.constants.RELEASE_MS, False, now_ms)
		self.osc.stop(release_ms)
		self.noise.stop()

		self.playing = False


	def destroy (self) -> None:

		self.stop()

		for lfo in self.lfos.values():
			lfo.stop()


	async def play (self, composition: typing.Union[surferrosa.melody.Melody, typing.Iterable[typing.Any]]) -> "Instrument":

		"""
		Play a melody or composition literal and return once it has finished.
		"""

		if isinstance(composition, surferrosa.melody.Melody):
			composition = composition.copy()

		schedule = self.scheduler.schedule(composition)

		logger.info(f"Playing {schedule.duration:.0f} ms")

		self.start()

		try:
			await self.play_scheduled(schedule)
		finally:
			self.stop()

		return self
