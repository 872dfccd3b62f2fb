# =============================================================================
# EventStreams Client -- Package Logger
# =============================================================================

import logging

logger = logging.getLogger("eventstreams")
