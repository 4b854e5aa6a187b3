VERSION = "0.3.0"

# Server API paths, appended to the endpoint the session was authenticated against
AUTHENTICATION_PATH = "/api/authentication"
RECEIVERS_PATH = "/api/centers/{site_id}/rdhubs"
TAGS_PATH = "/api/centers/{site_id}/tags"
TAG_PATH = "/api/centers/{site_id}/tags/{tag_id}"

UNKNOWN_TAG_NAME = "Unknown"

# iBeacon proximity UUID broadcast by registered devices. The server only hands
# out major/minor, so deployers must set this to the namespace their receivers scan for.
DEFAULT_BEACON_NAMESPACE = "3E8C0296-168B-4940-ADB0-B3088F7EE30E"

# Map scale of a site before and after its receiver topology is known
DEFAULT_SCALE = 40.0
LOADED_SCALE = 128.0

# Transport
REQUEST_TIMEOUT = 5     # seconds, multiplied by attempt number for each retry
REQUEST_ATTEMPTS = 3    # only idempotent requests are retried
AVAILABILITY_TIMEOUT = 15

# Tracker update intervals (seconds)
TOPOLOGY_INTERVAL = 300      # receivers rarely move
TAGS_INTERVAL = 60           # tag catalogue
POSITIONS_INTERVAL = 2       # nearest receiver of each followed tag

# Per-tag request queue
REQUEST_DELAY = 0.2          # minimum gap between consecutive calls on the same tag queue

ENV_PREFIX = "SKYWALKER_"
