import argparse
import logging
import typing

import groovesmith.config
import groovesmith.constants
import groovesmith.display
import groovesmith.session


# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def build_parser () -> argparse.ArgumentParser:

	"""
	Build the command line parser. Every option overrides the config file.
	"""

	parser = argparse.ArgumentParser(prog="groovesmith", description="Generate drum, bass and 808 patterns as MIDI")
	parser.add_argument("--config", default="groovesmith.yaml", help="YAML config file (default: groovesmith.yaml)")
	parser.add_argument("--engine", choices=groovesmith.config.ENGINE_NAMES, help="Which generator to run")
	parser.add_argument("--style", help="Drum style for the drums engine, bass style otherwise")
	parser.add_argument("--key", help="Key for melodic engines (e.g. C, F#, Bb)")
	parser.add_argument("--scale", help="Scale for melodic engines (e.g. 'Natural Minor')")
	parser.add_argument("--bars", type=int, choices=groovesmith.constants.BAR_CHOICES, help="Number of bars")
	parser.add_argument("--seed", type=int, help="Random seed (-1 for a fresh one)")
	parser.add_argument("--time-signature", dest="time_signature", help="Meter, e.g. 4/4, 7/8, 3+2+2/8")
	parser.add_argument("--out", help="Write the pattern to this .mid file")
	return parser


def apply_overrides (config: groovesmith.config.GenerationConfig, args: argparse.Namespace) -> groovesmith.config.GenerationConfig:

	"""
	Return a new config with the command line overrides applied.
	"""

	values: typing.Dict[str, typing.Any] = config.to_dict()

	for name in ("engine", "key", "scale", "bars", "seed", "time_signature"):
		value = getattr(args, name, None)
		if value is not None:
			values[name] = value

	if args.style is not None:
		style_field = "drum_style" if values["engine"] == "drums" else "bass_style"
		values[style_field] = args.style

	return groovesmith.config.GenerationConfig.from_mapping(values)


def main (argv: typing.Optional[typing.List[str]] = None) -> None:

	"""
	Main entry point for the groovesmith command line.
	"""

	args = build_parser().parse_args(argv)

	config = apply_overrides(groovesmith.config.load_config(args.config), args)
	session = groovesmith.session.Session(config)

	logger.info(f"Groovesmith starting ({config.engine} engine)...")

	pattern = session.generate()

	print(groovesmith.display.render_text(pattern))

	if args.out:
		session.export(args.out)


if __name__ == "__main__":
	main()
