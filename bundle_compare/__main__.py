import sys

from bundle_compare.cli import main

sys.exit(main())
