"""Oscillator waveforms.

Built-in shapes (``sine``, ``triangle``, ``square``, ``sawtooth`` and its alias
``saw``) are passed to the backend by name.  The other names describe a
periodic wave by its harmonic amplitudes, starting with the DC term:

    violin, viola, string_a, bass, horn, chiptune, organ_1, organ_2,
    exp1 (trombone-like at low pitch), exp2 and exp4 (bass-like), exp3 (brass)
"""

import dataclasses
import math
import typing

import surferrosa.errors


BUILTIN_WAVEFORMS: typing.Dict[str, str] = {
	"sine": "sine",
	"triangle": "triangle",
	"square": "square",
	"sawtooth": "sawtooth",
	"saw": "sawtooth",
}


@dataclasses.dataclass(frozen=True)
class Waveform:

	"""
	A resolved waveform: either a built-in shape or a periodic wave's coefficients.
	"""

	name: str
	builtin: typing.Optional[str] = None
	real: typing.Tuple[float, ...] = ()
	imag: typing.Tuple[float, ...] = ()


	@property
	def is_periodic (self) -> bool:
		return self.builtin is None


def _chiptune () -> typing.List[float]:
	return [4 / (i * math.pi) * math.sin(math.pi * i * 0.18) for i in range(1, 100)]


def _exp1 () -> typing.List[float]:
	return [math.exp(1 - math.sqrt(2 * i)) for i in range(1, 50)]


def _exp2 () -> typing.List[float]:
	return [math.exp(1 - math.log(i + 2) ** 2) for i in range(1, 50)]


def _exp3 () -> typing.List[float]:
	return [math.exp(1 - i) for i in range(1, 50)]


def _exp4 () -> typing.List[float]:
	return [1.5 * math.cos(i ** 2) / i ** 2 for i in range(1, 50)]


HARMONIC_TABLES: typing.Dict[str, typing.Callable[[], typing.List[float]]] = {
	"violin": lambda: [0, 1, 4/9, 4/9, 4/9, 6/9, 5/9, 6/9, 5/9, 3/9, 3/9, 2/9, 1/9, 2/9, 2/9, 1/9],
	"viola": lambda: [0, 3/6, 1, 5/12, 5/6, 2/6, 4/6, 1/6, 2/6, 1/12, 1/6],
	"string_a": lambda: [0, 1, 37/40, 33/40, 23/40, 2/40, 18/40, 22/40, 21/40, 14/40, 2/40, 11/40, 16/40, 15/40, 8/40, 2/40, 6/40, 12/40, 11/40, 5/40],
	"bass": lambda: [0, 1, 0.8144, 0.2062, 0.0206],
	"horn": lambda: [0, 0.4, 0.4, 1, 1, 1, 0.3, 0.7, 0.6, 0.5, 0.9, 0.8],
	"chiptune": _chiptune,
	"organ_1": lambda: [0, 1, 1, 1, 1, 0, 1, 0, 1, 0, 0, 0, 1],
	"organ_2": lambda: [0, 0.8, 0.6, 0.6, 0.7, 0.6, 0, 0.8, 0.3, 1],
	"exp1": _exp1,
	"exp2": _exp2,
	"exp3": _exp3,
	"exp4": _exp4,
}


def resolve_waveform (name: str) -> Waveform:

	"""
	Look up a waveform by name.

	Raises ``ConfigurationError`` for unknown names.
	"""

	if name in BUILTIN_WAVEFORMS:
		return Waveform(name=name, builtin=BUILTIN_WAVEFORMS[name])

	table = HARMONIC_TABLES.get(name)

	if table is None:
		available = ", ".join(f'"{key}"' for key in sorted([*BUILTIN_WAVEFORMS, *HARMONIC_TABLES]))
		raise surferrosa.errors.ConfigurationError(f"Unknown wave type {name!r}. Available waveforms: {available}")

	imag = tuple(float(v) for v in table())

	return Waveform(name=name, real=(0.0,) * len(imag), imag=imag)
