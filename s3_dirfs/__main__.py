"""Module entry point for the s3-dirfs command line."""
import sys

from .cli import main


if __name__ == "__main__":
    sys.exit(main())
