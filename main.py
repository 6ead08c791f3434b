import sys

from adept import run

# Host-level overrides picked up by the help and fault renderers
__prog__ = "adept"
__styles__ = {
    "option-name": "bold green",
    "metavar": "yellow",
    "code": "bold yellow",
}


if __name__ == '__main__':
    sys.exit(run())
