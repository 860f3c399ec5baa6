import sys

from threshold_keys.cli import main

sys.exit(main())
