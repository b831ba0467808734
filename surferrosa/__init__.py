"""
Surferrosa - an authoring DSL for procedural music.

Melodies are written as short note sequences and reshaped with a small
algebra (repeat, transpose, time-stretch, arpeggiate).  Instruments then lay
envelopes over every note and turn the melody into timed automation for
oscillator frequency and gain, noise gain and filter frequency.  The
automation is written to a sound-generation backend; Surferrosa itself
produces no audio.

- **Melody algebra.** ``Melody`` is immutable; every operation returns a new
  melody.  Shapes apply an operation per note: ``repeat([2, 1])`` splits the
  first note in two while keeping its length, ``transpose([0, 7, 12])`` moves
  each note by its own interval.
- **Envelopes.** Explicit ``(t, v)`` points, named shapes
  (``"plucked-string"``) or parametric decays (``"damp(2)*0.5"``).
- **Scheduling.** ``Scheduler`` converts beats to milliseconds, pitch
  classes to Hz and envelopes to ``ScheduleSegment`` ramps.
- **Backends.** ``AutomationBackend`` records everything in memory;
  ``OscBackend`` forwards it to a synthesis engine over OSC.

Minimal example:

    ```python
    import asyncio
    import surferrosa

    band = surferrosa.Surferrosa()
    band.song.make([{"note": "A", "oct": -2}]).change(lambda m: m.funky_bass()).save("riff")
    band.band.make({"osc": {"type": "bass"}, "envelopes": {"osc.gain": "plucked-string"}}).save("bass")

    asyncio.run(band.play({"bass": "riff"}, loop=2))
    ```

Package-level exports: ``Melody``, ``NoteEvent``, ``Envelope``, ``Scheduler``,
``Instrument``, ``InstrumentConfig``, ``Registry``, ``Surferrosa``.
"""

import surferrosa.envelope
import surferrosa.ensemble
import surferrosa.instrument
import surferrosa.melody
import surferrosa.registry
import surferrosa.scheduler


Melody = surferrosa.melody.Melody
NoteEvent = surferrosa.melody.NoteEvent
Envelope = surferrosa.envelope.Envelope
Scheduler = surferrosa.scheduler.Scheduler
Instrument = surferrosa.instrument.Instrument
InstrumentConfig = surferrosa.instrument.InstrumentConfig
Registry = surferrosa.registry.Registry
Surferrosa = surferrosa.ensemble.Surferrosa
