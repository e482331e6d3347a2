import sys

from markdown_inventory.main import main

sys.exit(main())
