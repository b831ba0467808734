import pytest

import surferrosa.errors
import surferrosa.melody
import surferrosa.registry


@pytest.fixture
def album () -> surferrosa.registry.Registry:

	"""A registry of melodies."""

	return surferrosa.registry.Registry("album", surferrosa.melody.Melody)


def test_make_change_save_get (album: surferrosa.registry.Registry) -> None:

	"""The working object is built, changed and stored under a name."""

	album.make([{"note": "A"}, {"note": "B"}]).change(lambda m: m.loop(2)).save("intro")

	assert "intro" in album
	assert album.names() == ["intro"]
	assert album.get("intro").length() == 4


def test_save_without_make_raises (album: surferrosa.registry.Registry) -> None:

	"""Nothing can be saved before something is made."""

	with pytest.raises(surferrosa.errors.NotFoundError, match="nothing has been made"):
		album.save("intro")


def test_get_unknown_raises (album: surferrosa.registry.Registry) -> None:

	"""Unknown names raise NotFoundError, which is also a KeyError."""

	with pytest.raises(KeyError):
		album.get("outro")

	with pytest.raises(surferrosa.errors.NotFoundError, match="couldn't get 'outro' because it's not defined"):
		album.get("outro")


def test_change_without_current_raises (album: surferrosa.registry.Registry) -> None:

	"""change() needs a working object."""

	with pytest.raises(surferrosa.errors.NotFoundError):
		album.change(lambda m: m)


def test_clone_leaves_the_original (album: surferrosa.registry.Registry) -> None:

	"""Changing a clone and saving it under a new name keeps the original as it was."""

	album.make([{"note": "A"}]).save("theme")
	album.clone("theme").change(lambda m: m.transpose(12)).save("theme_high")

	assert album.get("theme").notes[0].halfstep_offset == 0
	assert album.get("theme_high").notes[0].halfstep_offset == 12


def test_saved_object_survives_later_changes (album: surferrosa.registry.Registry) -> None:

	"""Further changes to the working object do not alter what was saved."""

	album.make([{"note": "A"}]).save("theme")
	album.change(lambda m: m.loop(3))

	assert album.get("theme").length() == 1
	assert album.current.length() == 3


def test_clone_requires_a_cloning_method () -> None:

	"""Objects without clone() cannot be cloned."""

	registry = surferrosa.registry.Registry("numbers", int)
	registry.make(3).save("three")

	with pytest.raises(surferrosa.errors.UnsupportedOperationError, match="no cloning method"):
		registry.clone("three")
