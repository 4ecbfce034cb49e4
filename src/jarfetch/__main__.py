import sys

from jarfetch.cli import main

sys.exit(main())
