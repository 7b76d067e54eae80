import sys

from wavspectrum.main import main

sys.exit(main())
