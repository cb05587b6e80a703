#!/usr/bin/env python3
"""Image Sifter - Keep or discard JPEGs one at a time, then copy the keepers."""

import argparse
import logging
import os
import sys

from app import SifterApp


def main():
    parser = argparse.ArgumentParser(description="Sift through a folder tree of JPEG images.")
    parser.add_argument("folder", nargs="?", help="working folder to open on start")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    folder = None
    if args.folder:
        folder = os.path.abspath(args.folder)
        if not os.path.isdir(folder):
            print(f"Error: '{folder}' is not a valid directory.")
            sys.exit(1)
        print(f"Opening Image Sifter for: {folder}")

    SifterApp(folder)


if __name__ == "__main__":
    main()
