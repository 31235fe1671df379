"""Allow ``python -m debugsink``."""

from debugsink.server import main

main()
