import sys

from musitype.main import main

sys.exit(main())
