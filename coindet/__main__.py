import sys

from coindet.cli import main

sys.exit(main())
