import sys

from fluentbridge.cli import main

sys.exit(main())
