import sys

from tuiman.cli import main

sys.exit(main())
