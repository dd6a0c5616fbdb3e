import sys

from jql_bridge.app import main

sys.exit(main())
