import sys

from story_builders.bot import main

sys.exit(main())
