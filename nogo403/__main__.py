import sys

from nogo403.cli import main

sys.exit(main())
