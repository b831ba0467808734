import asyncio
import functools
import logging
import typing

import surferrosa.backend
import surferrosa.instrument
import surferrosa.melody
import surferrosa.registry


logger = logging.getLogger(__name__)


class Surferrosa:

	"""
	A band of instruments and an album of melodies, played together by name.

	Example::

		band = Surferrosa()
		band.song.make([{"note": "A"}, {"note": "E"}]).save("riff")
		band.band.make({"osc": {"type": "bass"}}).save("bass")
		await band.play({"bass": "riff"}, loop=4)
	"""

	def __init__ (self, backend: typing.Optional[surferrosa.backend.Backend] = None) -> None:

		self.backend: surferrosa.backend.Backend = backend if backend is not None else surferrosa.backend.AutomationBackend()

		self.song: surferrosa.registry.Registry[surferrosa.melody.Melody] = surferrosa.registry.Registry("album", surferrosa.melody.Melody)
		self.band: surferrosa.registry.Registry[surferrosa.instrument.Instrument] = surferrosa.registry.Registry(
			"band",
			functools.partial(surferrosa.instrument.Instrument, backend=self.backend)
		)


	async def play (self, mapping: typing.Mapping[str, str], loop: int = 1) -> None:

		"""
		Play each instrument's melody concurrently, looped ``loop`` times, then tear the instruments down.

		Parameters:
			mapping: Melody name per instrument name.
			loop: How many times each melody repeats.

		Raises ``NotFoundError`` before anything plays if a name is missing.
		"""

		tracks = [
			(self.band.get(instrument_name), self.song.get(melody_name).loop(loop))
			for instrument_name, melody_name in mapping.items()
		]

		logger.info(f"Playing {len(tracks)} {'track' if len(tracks) == 1 else 'tracks'}: {dict(mapping)}")

		try:
			await asyncio.gather(*(instrument.play(melody) for instrument, melody in tracks))
		finally:
			for instrument, _ in tracks:
				instrument.destroy()

		logger.info("Finished")
