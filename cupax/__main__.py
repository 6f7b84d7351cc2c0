import sys

from cupax.cli import main

sys.exit(main())
