import sys

from terrain.cli import main

sys.exit(main())
