import logging

import pytest

import surferrosa.envelope
import surferrosa.melody
import surferrosa.scheduler


Segment = surferrosa.envelope.ScheduleSegment


def _scheduler (**envelopes: list) -> surferrosa.scheduler.Scheduler:

	"""Build a scheduler from keyword envelopes; underscores stand for dots in target names."""

	return surferrosa.scheduler.Scheduler(
		envelopes = {key.replace("_", "."): surferrosa.envelope.Envelope(points) for key, points in envelopes.items()}
	)


def test_note_to_frequency () -> None:

	"""A at octave 0 is the base frequency; octaves double it; rests are zero."""

	assert surferrosa.scheduler.note_to_frequency("A") == pytest.approx(440.0)
	assert surferrosa.scheduler.note_to_frequency("A", octave=1) == pytest.approx(880.0)
	assert surferrosa.scheduler.note_to_frequency("A", halfstep_offset=-12) == pytest.approx(220.0)
	assert surferrosa.scheduler.note_to_frequency("C") == pytest.approx(440.0 * 2 ** (3 / 12))
	assert surferrosa.scheduler.note_to_frequency("0") == 0.0
	assert surferrosa.scheduler.note_to_frequency("H") is None


def test_composition_flags_single_item () -> None:

	"""A single item is both first and last."""

	items = _scheduler().normalize_composition([{"note": "A"}])

	assert items[0].is_first and items[0].is_last


def test_composition_flags () -> None:

	"""Exactly one first and one last item are flagged."""

	items = _scheduler().normalize_composition([{"note": "A"}, {"note": "B"}, {"note": "C"}])

	assert [i.is_first for i in items] == [True, False, False]
	assert [i.is_last for i in items] == [False, False, True]


def test_empty_composition () -> None:

	"""An empty composition schedules nothing and lasts zero."""

	schedule = _scheduler(osc_gain=[[0, 1], [1, 1]]).schedule([])

	assert schedule.duration == 0
	assert schedule.segments(surferrosa.scheduler.OSC_GAIN) == []


def test_normalize_item_converts_to_ms () -> None:

	"""Durations and delays are converted with the tempo; missing fields get defaults."""

	scheduler = surferrosa.scheduler.Scheduler(envelopes={}, ms_per_beat=250)

	item = scheduler.normalize_item({"duration": 2, "delay": 0.5})

	assert item.pitch_class == "A"
	assert item.kind == "note"
	assert item.duration == 500
	assert item.delay == 125


def test_normalize_item_accepts_note_events () -> None:

	"""NoteEvents from a melody are accepted directly."""

	item = _scheduler().normalize_item(surferrosa.melody.NoteEvent("C", halfstep_offset=2, octave=1, duration=0.5))

	assert (item.pitch_class, item.halfstep_offset, item.octave, item.duration) == ("C", 2, 1, 500)


def test_note_then_rest () -> None:

	"""A note then a rest: one zeroed gain block for the note, nothing for the rest, 2000 ms in total."""

	scheduler = _scheduler(osc_gain=[[0, 0], [0.5, 1], [1, 0]])

	schedule = scheduler.schedule([{"pitch_class": "A", "octave": 0, "duration": 1}, {"pitch_class": "0", "duration": 1}])

	assert schedule.duration == 2000
	assert schedule.blocks[surferrosa.scheduler.OSC_GAIN] == [[
		Segment(0, 0, 0),
		Segment(0, 500, 1),
		Segment(0, 1000, 0),
	]]
	assert schedule.blocks[surferrosa.scheduler.OSC_FREQ] == []


def test_first_value_is_zeroed () -> None:

	"""The first note's gain starts from zero; later notes keep their first value."""

	scheduler = _scheduler(osc_gain=[[0, 1], [0.5, 1], [1, 1]])

	schedule = scheduler.schedule([{"note": "A"}, {"note": "A"}, {"note": "A"}])
	first, middle, last = schedule.blocks[surferrosa.scheduler.OSC_GAIN]

	assert [s.value for s in first] == [0, 1, 1]
	assert [s.value for s in middle] == [1, 1, 1]
	assert [s.value for s in last] == [1, 1, 0]


def test_windows_follow_the_cursor () -> None:

	"""Each note's window starts where the previous one ended."""

	scheduler = _scheduler(osc_freq=[[0, 1], [1, 1]])

	schedule = scheduler.schedule([{"note": "A", "duration": 0.5}, {"note": "0", "duration": 1}, {"note": "A", "oct": 1, "duration": 2}])
	blocks = schedule.blocks[surferrosa.scheduler.OSC_FREQ]

	assert [block[0].start_ms for block in blocks] == [0, 1500]
	assert [block[-1].ramp_ms for block in blocks] == [500, 2000]
	assert blocks[1][0].value == pytest.approx(880.0)
	assert schedule.duration == 3500


def test_master_gain_scales_gain_envelopes () -> None:

	"""Gain envelopes are multiplied by the master gain; filter envelopes are not."""

	scheduler = surferrosa.scheduler.Scheduler(
		envelopes = {
			surferrosa.scheduler.OSC_GAIN: surferrosa.envelope.Envelope([[0, 1], [1, 1]]),
			surferrosa.scheduler.FILTER_FREQ: surferrosa.envelope.Envelope([[0, 800], [1, 200]]),
		},
		master_gain = 0.5
	)

	schedule = scheduler.schedule([{"note": "A"}])

	assert [s.value for s in schedule.segments(surferrosa.scheduler.OSC_GAIN)] == [0.5, 0.5]
	assert [s.value for s in schedule.segments(surferrosa.scheduler.FILTER_FREQ)] == [800, 200]


def test_leading_rest_silences_noise () -> None:

	"""A leading rest emits a noise gain block pinned to zero."""

	scheduler = _scheduler(noise_gain=[[0, 1], [0.5, 1], [1, 1]], osc_gain=[[0, 1], [1, 1]])

	schedule = scheduler.schedule([{"note": "0"}, {"note": "A"}])
	noise = schedule.blocks[surferrosa.scheduler.NOISE_GAIN]

	assert len(noise) == 2
	assert [s.value for s in noise[0]] == [0, 0, 0]
	assert len(schedule.blocks[surferrosa.scheduler.OSC_GAIN]) == 1


def test_delay_does_not_move_the_cursor () -> None:

	"""Delays are carried on the items but the cursor only advances by duration."""

	scheduler = _scheduler(osc_gain=[[0, 1], [1, 1]])

	schedule = scheduler.schedule([{"note": "A", "delay": 3}, {"note": "A"}])

	assert schedule.duration == 2000
	assert schedule.blocks[surferrosa.scheduler.OSC_GAIN][1][0].start_ms == 1000


def test_base_octave_shifts_every_note () -> None:

	"""The scheduler's base octave is added to the note octave."""

	scheduler = surferrosa.scheduler.Scheduler(
		envelopes = {surferrosa.scheduler.OSC_FREQ: surferrosa.envelope.Envelope([[0, 1], [1, 1]])},
		base_octave = -1
	)

	schedule = scheduler.schedule([{"note": "A"}])

	assert schedule.segments(surferrosa.scheduler.OSC_FREQ)[0].value == pytest.approx(220.0)


def test_unknown_pitch_class_is_a_rest (caplog: pytest.LogCaptureFixture) -> None:

	"""An unknown pitch class warns and schedules nothing."""

	scheduler = _scheduler(osc_gain=[[0, 1], [1, 1]])

	with caplog.at_level(logging.WARNING, logger="surferrosa.scheduler"):
		schedule = scheduler.schedule([{"note": "H"}])

	assert schedule.segments(surferrosa.scheduler.OSC_GAIN) == []
	assert schedule.duration == 1000
	assert "Unknown pitch class 'H'" in caplog.text


def test_targets_without_envelope_are_empty () -> None:

	"""Every target is present in the schedule even when nothing is emitted for it."""

	schedule = _scheduler(osc_gain=[[0, 1], [1, 1]]).schedule([{"note": "A"}])

	assert set(schedule.blocks) == set(surferrosa.scheduler.ENVELOPE_TARGETS)
	assert schedule.blocks[surferrosa.scheduler.FILTER_FREQ] == []


def test_tempo_must_be_positive () -> None:

	"""A zero or negative tempo is rejected."""

	with pytest.raises(ValueError):
		surferrosa.scheduler.Scheduler(envelopes={}, ms_per_beat=0)
