import sys

from kb_cleanup.cli import main

sys.exit(main())
