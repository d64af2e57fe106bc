import sys

from flappy.main import main

sys.exit(main())
