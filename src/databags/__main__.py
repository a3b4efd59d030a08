import sys

from databags.cli import main

sys.exit(main())
