#!/usr/bin/env python3
# {{ Copyright }}
# Author: {{ Author }}
"""{{ ProjectName }} -- created {{ Date }}."""


def main() -> None:
    print("Hello from {{ ProjectName }}!")


if __name__ == "__main__":
    main()
