"""Constants for storagedriver."""

# Granularity of chunked stream copies (bytes)
DEFAULT_CHUNK_SIZE = 1024 * 1024

# Configuration
CONFIG_FILE = "storagedriver.yaml"
CONFIG_ENV = "STORAGEDRIVER_CONFIG"
DRIVER_ENV = "STORAGEDRIVER_DRIVER"

# Driver used when nothing is configured
DEFAULT_DRIVER = "inmemory"

# Version
STORAGEDRIVER_VERSION = "0.1.0"
