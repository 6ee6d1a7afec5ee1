import sys

from memory_cache.cli import main

sys.exit(main())
