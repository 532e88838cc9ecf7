"""CLI entrypoint for the image fader."""

import sys

from image_fader.cli import main

if __name__ == "__main__":
    sys.exit(main())
