"""
Groovesmith - a seeded pattern generator for drums, bass and 808 lines.

Groovesmith turns compact per-genre rule tables into varied, musically
plausible patterns on a 16th-note tick grid, and exports them as MIDI. Every
generator is a pure function of its inputs and a seed: the same seed always
gives the same pattern, and the default "auto" seed never repeats.

What it does:

- **Drums from rule tables.** Nine styles (trap, drill, edm, reggaeton,
  r&b, pop, rock, wxstie, hip hop) describe per-step hit probabilities,
  velocity ranges and roll behaviour. Swing, triplet and dotted feel and
  rest density bend the tables; beats 2 and 4 are locked after generation.
- **Bass and 808 lines in any key.** A step-scan generator mixes sustained
  notes and fast bursts; a phrase-level 808 generator picks one grid family
  and one pitch strategy per call. Forty scales, odd meters included.
- **Edits.** Flip (micro-variation), style blend, humanize, lane bump,
  transpose-and-snap to a scale and groove expansion.
- **Audio to drums.** A real-time-safe capture ring buffer feeds a banded
  onset transcriber that quantizes hits to the supplied tempo.

Minimal example:

```python
import groovesmith

pattern = groovesmith.drum_generator.generate("trap", bars=4, seed=42)
groovesmith.midi_export.save_midi(pattern, "trap.mid")
```

Or from the command line::

	python -m groovesmith --engine drums --style trap --bars 4 --seed 42 --out trap.mid

Package-level exports: ``Session``, ``GenerationConfig``, ``load_config``,
``Pattern``, ``Note``, ``PatternKind``.
"""

import groovesmith.blend
import groovesmith.capture
import groovesmith.config
import groovesmith.drum_generator
import groovesmith.flip
import groovesmith.melodic_generator
import groovesmith.midi_export
import groovesmith.transcription
import groovesmith.transforms

from groovesmith.config import GenerationConfig, load_config
from groovesmith.pattern import Note, Pattern, PatternKind
from groovesmith.session import Session


__all__ = [
	"GenerationConfig",
	"Note",
	"Pattern",
	"PatternKind",
	"Session",
	"load_config",
]
