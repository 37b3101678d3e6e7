"""Allow ``python -m reticule``."""

from reticule.app import main

if __name__ == "__main__":
    main()
