import sys

from image_fader.cli import main

sys.exit(main())
