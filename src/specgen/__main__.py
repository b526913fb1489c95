"""Allow ``python -m specgen``."""

from specgen.app import main

if __name__ == "__main__":
    main()
