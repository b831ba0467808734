import argparse
import asyncio
import logging
import sys
import typing

import surferrosa.backend
import surferrosa.config
import surferrosa.ensemble
import surferrosa.osc


# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def main (argv: typing.Optional[typing.List[str]] = None) -> int:

	"""
	Play a song file.
	"""

	parser = argparse.ArgumentParser(prog="surferrosa", description="Play a Surferrosa song file.")
	parser.add_argument("song", help="path to a YAML song file")
	parser.add_argument("--dry-run", action="store_true", help="schedule without sending anything and log a summary")
	parser.add_argument("--osc-host", default="127.0.0.1", help="synthesis engine host (default: %(default)s)")
	parser.add_argument("--osc-port", type=int, default=57120, help="synthesis engine UDP port (default: %(default)s)")
	args = parser.parse_args(argv)

	backend: surferrosa.backend.Backend

	if args.dry_run:
		backend = surferrosa.backend.AutomationBackend(realtime=False)
	else:
		backend = surferrosa.osc.OscBackend(host=args.osc_host, port=args.osc_port)

	ensemble = surferrosa.ensemble.Surferrosa(backend)
	song = surferrosa.config.load_song(args.song, ensemble)

	if not song.play:
		logger.error(f"Nothing to play in {args.song}")
		return 1

	try:
		asyncio.run(ensemble.play(song.play, loop=song.loop))
	except KeyboardInterrupt:
		logger.info("Stopping...")
	finally:
		backend.close()

	if isinstance(backend, surferrosa.backend.AutomationBackend):
		for line in backend.summary():
			logger.info(line)

	return 0


if __name__ == "__main__":
	sys.exit(main())
