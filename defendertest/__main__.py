import sys

from .defendertest import main

sys.exit(main())
