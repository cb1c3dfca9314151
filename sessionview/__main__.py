import sys

from sessionview.cli.main import main

sys.exit(main())
