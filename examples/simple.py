import asyncio
import logging

import surferrosa
import surferrosa.backend

logging.basicConfig(level=logging.INFO)

# Swap in surferrosa.osc.OscBackend() to drive a synthesis engine.
backend = surferrosa.backend.AutomationBackend()

band = surferrosa.Surferrosa(backend)

band.band.make({
	"temp": 250,
	"oct": -2,
	"osc": {"type": "bass"},
	"envelopes": {"osc.gain": "plucked-string"},
}).save("bass")

band.band.make({
	"temp": 500,
	"osc": {"type": "violin"},
	"filter": {"type": "lowpass", "freq": 1200},
	"envelopes": {"osc.gain": "bowed-string", "filter.freq": [[0, 400], [0.5, 2400], [1, 400]]},
	"lfos": {"osc.freq": {"n": 4, "gain": 3}},
}).save("lead")

# One note per bar, each spread over the bass pattern.
band.song.make([
	{"note": "E"},
	{"note": "E"},
	{"note": "D"},
	{"note": "A"},
]).change(lambda m: m.map(lambda note: note.blue_monday_bass())).save("bass_line")

# A phrase that breathes: the last note held while the others hurry.
band.song.make([
	{"note": "E", "oct": 1},
	{"note": "G", "oct": 1},
	{"note": "A", "oct": 1},
	{"note": "B", "oct": 1},
]).change(lambda m: m.prolong_last(2.5)).save("theme")

band.song.clone("theme").change(lambda m: m.transpose(-5).temp([1, 1, 1, 0.5])).save("answer")

if __name__ == "__main__":

	asyncio.run(band.play({"bass": "bass_line", "lead": "theme"}, loop=2))

	for line in backend.summary():
		logging.info(line)
