"""Run the Story Builders Slack bot from a source checkout: `python main.py`."""

import sys

from story_builders.bot import main

if __name__ == "__main__":
    sys.exit(main())
