"""python -m src.tree_watch 진입점."""

import sys

from src.tree_watch.main import main

sys.exit(main())
