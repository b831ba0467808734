class SurferrosaError (Exception):

	"""Base error for the Surferrosa package."""


class ConfigurationError (SurferrosaError, ValueError):

	"""Raised when a name, descriptor or setting cannot describe a valid configuration."""


class AuthoringError (SurferrosaError):

	"""Raised by strict melodies for recoverable misuse of the algebra."""


class ShapeMismatchError (AuthoringError):

	"""Raised by strict melodies when a shape does not fit the melody length."""


class NotFoundError (SurferrosaError, KeyError):

	"""Raised when a registry lookup has nothing to return."""

	def __str__ (self) -> str:

		# KeyError quotes its argument, which garbles sentence-style messages.
		return str(self.args[0]) if self.args else ""


class UnsupportedOperationError (SurferrosaError):

	"""Raised when an object lacks the capability an operation requires."""
