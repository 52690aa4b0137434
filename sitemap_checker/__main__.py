import sys

from sitemap_checker.main import main

sys.exit(main())
