import logging
import pathlib

import pytest

import surferrosa.__main__
import surferrosa.config
import surferrosa.ensemble
import surferrosa.errors
import surferrosa.melody


SONG = """
instruments:
  bass:
    temp: 500
    oct: -2
    osc: {type: bass}
    envelopes: {osc.gain: plucked-string}
melodies:
  riff:
    notes:
      - {note: A}
      - {note: 0}
      - {note: E, ht: 2}
    transforms:
      - [repeat, [2, 1, 1]]
      - transpose: [0, 12, 0, 0]
      - [prolong_last, 1.5]
play: {bass: riff}
loop: 2
"""


@pytest.fixture
def song_path (tmp_path: pathlib.Path) -> pathlib.Path:

	"""A song file on disk."""

	path = tmp_path / "song.yaml"
	path.write_text(SONG)

	return path


def test_load_song_registers_everything (song_path: pathlib.Path) -> None:

	"""Instruments and transformed melodies are registered; play and loop are returned."""

	ensemble = surferrosa.ensemble.Surferrosa()

	song = surferrosa.config.load_song(str(song_path), ensemble)

	assert song == surferrosa.config.Song(play={"bass": "riff"}, loop=2)

	bass = ensemble.band.get("bass")
	assert bass.config.ms_per_beat == 500
	assert bass.config.octave == -2

	riff = ensemble.song.get("riff")
	assert [n.pitch_class for n in riff] == ["A", "A", "0", "E"]
	assert [n.halfstep_offset for n in riff] == [0, 12, 0, 2]
	assert riff.notes[-1].duration == pytest.approx(1.5)


def test_apply_transforms_step_forms () -> None:

	"""Steps may be a name, a list or a single-key mapping."""

	melody = surferrosa.melody.Melody([{"note": "A"}])

	result = surferrosa.config.apply_transforms(melody, ["funky_bass", ["loop", 2], {"temp": 0.5}])

	assert [n.halfstep_offset for n in result] == [0, 12, 0, 12] * 2
	assert result.total_duration() == pytest.approx(1.0)


def test_unknown_transform_raises () -> None:

	"""Only the melody algebra is reachable from song files."""

	melody = surferrosa.melody.Melody([{"note": "A"}])

	with pytest.raises(surferrosa.errors.ConfigurationError, match="Unknown melody transform"):
		surferrosa.config.apply_transforms(melody, ["set"])


def test_malformed_transform_raises () -> None:

	"""A step that is neither a name, a list nor a mapping is rejected."""

	with pytest.raises(surferrosa.errors.ConfigurationError, match="Malformed"):
		surferrosa.config.apply_transforms(surferrosa.melody.Melody(), [42])


def test_strict_melody_in_song (tmp_path: pathlib.Path) -> None:

	"""A strict melody with a bad shape fails to load."""

	path = tmp_path / "strict.yaml"
	path.write_text("melodies:\n  bad:\n    strict: true\n    notes: [{note: A}]\n    transforms: [[transpose, [1, 2]]]\n")

	with pytest.raises(surferrosa.errors.ShapeMismatchError):
		surferrosa.config.load_song(str(path), surferrosa.ensemble.Surferrosa())


def test_missing_config_uses_defaults (tmp_path: pathlib.Path, caplog: pytest.LogCaptureFixture) -> None:

	"""A missing file loads as empty and warns."""

	with caplog.at_level(logging.WARNING, logger="surferrosa.config"):
		config = surferrosa.config.load_config(str(tmp_path / "missing.yaml"))

	assert config == {}
	assert "not found" in caplog.text


def test_main_dry_run (song_path: pathlib.Path, caplog: pytest.LogCaptureFixture) -> None:

	"""A dry run plays the song in memory and logs a summary."""

	with caplog.at_level(logging.INFO, logger="surferrosa.__main__"):
		assert surferrosa.__main__.main([str(song_path), "--dry-run"]) == 0

	assert "oscillator-0.frequency" in caplog.text


def test_main_nothing_to_play (tmp_path: pathlib.Path) -> None:

	"""A song without a play section exits with an error code."""

	assert surferrosa.__main__.main([str(tmp_path / "missing.yaml"), "--dry-run"]) == 1
