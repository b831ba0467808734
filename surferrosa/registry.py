import logging
import typing

import surferrosa.errors


logger = logging.getLogger(__name__)

T = typing.TypeVar("T")


class Registry (typing.Generic[T]):

	"""
	Named storage for composed objects, built around a "current" working object.

	Example::

		album = Registry("album", surferrosa.melody.Melody)
		album.make([{"note": "A"}]).change(lambda m: m.loop(2)).save("intro")
		album.clone("intro").change(lambda m: m.transpose(12)).save("intro_high")
	"""

	def __init__ (self, name: str, factory: typing.Callable[..., T]) -> None:

		self.name = name
		self.factory = factory

		self._storage: typing.Dict[str, T] = {}
		self._current: typing.Optional[T] = None


	@property
	def current (self) -> typing.Optional[T]:
		return self._current


	def __contains__ (self, name: object) -> bool:
		return name in self._storage


	def names (self) -> typing.List[str]:

		return list(self._storage)


	def make (self, *args: typing.Any, **kwargs: typing.Any) -> "Registry[T]":

		"""Build a new current object with the factory."""

		self._current = self.factory(*args, **kwargs)

		return self


	def save (self, name: str) -> "Registry[T]":

		"""
		Store the current object under ``name``.
		"""

		if self._current is None:
			raise surferrosa.errors.NotFoundError(f"{self.name}: couldn't save {name!r} because nothing has been made")

		self._storage[name] = self._current
		logger.debug(f"{self.name}: saved {name!r}")

		return self


	def get (self, name: str) -> T:

		"""
		Return the object stored under ``name``.
		"""

		if name not in self._storage:
			raise surferrosa.errors.NotFoundError(f"{self.name}: couldn't get {name!r} because it's not defined")

		return self._storage[name]


	def clone (self, name: str) -> "Registry[T]":

		"""
		Make a clone of a stored object the current one.
		"""

		stored = self.get(name)
		clone = getattr(stored, "clone", None)

		if not callable(clone):
			raise surferrosa.errors.UnsupportedOperationError(
				f"{self.name}: couldn't clone {name!r} because {type(stored).__name__} has no cloning method"
			)

		self._current = clone()

		return self


	def change (self, changer: typing.Callable[[T], T]) -> "Registry[T]":

		"""Replace the current object with ``changer(current)``."""

		if self._current is None:
			raise surferrosa.errors.NotFoundError(f"{self.name}: nothing to change, make or clone an object first")

		self._current = changer(self._current)

		return self
