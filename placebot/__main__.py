import sys

from placebot.main import main

sys.exit(main())
