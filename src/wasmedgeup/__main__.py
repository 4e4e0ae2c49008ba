"""Allow running wasmedgeup with `python -m wasmedgeup`."""

from .cli import main

if __name__ == "__main__":
    main()
