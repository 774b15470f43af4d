"""Allow ``python -m shedgen``."""

from shedgen.app import main

main()
