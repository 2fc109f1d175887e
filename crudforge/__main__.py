import sys

from crudforge.cli import main

sys.exit(main())
