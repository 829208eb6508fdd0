import sys

from notease.cli import main

sys.exit(main())
