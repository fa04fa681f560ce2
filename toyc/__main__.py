"""Allow ``python -m toyc``."""

from .cli import main

main()
