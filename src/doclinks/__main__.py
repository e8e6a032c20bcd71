"""Allow ``python -m doclinks``."""

from doclinks.cli import main

main()
