import logging

import groovesmith
import groovesmith.display

logging.basicConfig(level=logging.INFO)

config = groovesmith.GenerationConfig(
	engine="drums",
	drum_style="trap",
	bass_style="trap",
	key="F",
	scale="Natural Minor",
	bars=4,
	swing_pct=12,
	humanize_velocity=30,
	seed=42,
	bpm=140
)

session = groovesmith.Session(config)

# Drums first: the generator locks snare and clap onto 2 and 4 in every bar.
session.generate()
session.flip(density=30)
print(groovesmith.display.render_text(session.drum_pattern))
session.export("trap_drums.mid")

# An 808 line in the same key, then a darker take snapped to Phrygian.
session.set_engine("808")
session.generate()
print(groovesmith.display.render_text(session.melodic_pattern))
session.export("trap_808.mid")

session.transpose(scale="Phrygian", octave_delta=-1)
session.export("trap_808_phrygian.mid")
