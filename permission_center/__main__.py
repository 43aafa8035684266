import sys

from permission_center.app import main

sys.exit(main())
