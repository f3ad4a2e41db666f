import sys

from crd_schema_pull.cli import main

if __name__ == "__main__":
    sys.exit(main())
