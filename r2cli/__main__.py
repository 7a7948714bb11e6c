import sys

from r2cli.cli import main

sys.exit(main())
