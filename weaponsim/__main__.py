import sys

from weaponsim.main import main

sys.exit(main())
