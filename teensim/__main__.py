import sys

from teensim.cli import main

sys.exit(main())
