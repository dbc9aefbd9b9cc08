import sys

from dmg_background.cli import main

sys.exit(main())
