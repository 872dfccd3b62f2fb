# =============================================================================
# EventStreams Client -- Defaults and Protocol Constants
# =============================================================================

from ._version import __version__

# -- Endpoint ------------------------------------------------------------------

# Wikimedia EventStreams gateway, without any stream name
DEFAULT_URL = "https://stream.wikimedia.org/v2/stream"

SINCE_PARAM = "since"
MESSAGE_EVENT = "message"
USER_AGENT = f"eventstreams-python/{__version__}"

# -- Timing (seconds) --------------------------------------------------------

CONNECT_TIMEOUT = 10.0
READ_TIMEOUT = 60.0

# -- Reconnection -------------------------------------------------------------
#
# The Wikimedia traffic layer drops every client after 15 minutes, which
# surfaces as a stream error.  Failures spaced at least RESET_INTERVAL apart
# start a fresh retry budget; closer ones count towards MAX_RETRIES.

BACKOFF_MIN_DELAY = 0.1
BACKOFF_MAX_DELAY = 10.0
BACKOFF_FACTOR = 2.0
BACKOFF_JITTER = 0.1  # +/- fraction of the delay when jitter is on
MAX_RETRIES = 3
RESET_INTERVAL = 600.0  # 10 minutes
