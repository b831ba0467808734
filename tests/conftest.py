import typing

import pytest

import surferrosa.backend


class FakeOscClient:

	"""Records OSC messages instead of sending them."""

	def __init__ (self) -> None:

		self.messages: typing.List[typing.Tuple[str, typing.List[typing.Any]]] = []


	def send_message (self, address: str, value: typing.Any) -> None:

		"""Keep the message for inspection."""

		self.messages.append((address, list(value)))


	def addresses (self) -> typing.List[str]:

		"""Addresses of every message sent so far."""

		return [address for address, _ in self.messages]


@pytest.fixture
def clock () -> surferrosa.backend.ManualClock:

	"""A clock parked at two seconds."""

	return surferrosa.backend.ManualClock(start=2.0)


@pytest.fixture
def backend (clock: surferrosa.backend.ManualClock) -> surferrosa.backend.AutomationBackend:

	"""An in-memory backend that does not wait for playback to finish."""

	return surferrosa.backend.AutomationBackend(clock=clock, realtime=False)


@pytest.fixture
def osc_client () -> FakeOscClient:

	"""A fake OSC client."""

	return FakeOscClient()
