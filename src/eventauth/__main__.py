"""Entry point for 'python -m eventauth'."""

from eventauth.cli import main

if __name__ == "__main__":
    main()
