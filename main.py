import sys

from techcrunch_digest.cli import main

if __name__ == "__main__":
    sys.exit(main())
