import sys

from nestspec.cli import main

sys.exit(main())
