import sys

from content_search.cli import main


sys.exit(main())
