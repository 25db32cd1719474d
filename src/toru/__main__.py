"""Allow ``python -m toru``."""

from toru.cli import main

if __name__ == "__main__":
    main()
