import sys

from ccsessionctl.cli import main

sys.exit(main())
