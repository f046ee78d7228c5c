"""Allow ``python -m shotsolve``."""

from shotsolve.cli import main

if __name__ == "__main__":
    main()
