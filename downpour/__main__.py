import sys

from downpour.main import main


if __name__ == '__main__':
    sys.exit(main())
