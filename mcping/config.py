"""Defaults, entry points may overlay them from a ``privVars.py``."""

# default Minecraft Java Edition network port
DEFAULT_PORT = 25565

# manually updated, may be out of date
# Corresponding Minecraft version: 1.14.4
# More protocol versions: https://wiki.vg/Protocol_version_numbers
LATEST_PROTOCOL_VERSION = 498

# seconds, covers connect, writes and the response read together
DEFAULT_TIMEOUT = 5.0

DEBUG = False
LOG_LEVEL = 20
LOG_FILE = None
# "..." means unset
SENTRY_DSN = "..."
