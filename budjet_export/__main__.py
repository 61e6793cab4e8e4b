import sys

from budjet_export.cli import main

sys.exit(main())
