"""Allow ``python -m credential_alerts``."""

from .main import main

main()
