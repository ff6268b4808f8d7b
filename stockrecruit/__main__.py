import sys

from stockrecruit.cli import main

sys.exit(main())
