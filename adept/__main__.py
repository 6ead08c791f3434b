"""Allow `python -m adept`."""
from .commands import main

if __name__ == '__main__':
    main()
