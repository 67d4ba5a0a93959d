# hwid_agent/__main__.py

import sys

from hwid_agent.agent import main

if __name__ == "__main__":
    sys.exit(main())
