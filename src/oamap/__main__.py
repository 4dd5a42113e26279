import sys

from oamap.cli import main

sys.exit(main())
