from pathlib import Path

VERSION = "1.0.0"
SERVICE_NAME = "docpatch"

# RFC 6901
POINTER_DELIMITER = "/"
POINTER_ESCAPE_CHARACTER = "~"
ESCAPED_DELIMITER = "~1"
ESCAPED_ESCAPE_CHARACTER = "~0"
END_OF_ARRAY_MARKER = "-"

# RFC 6902
PATCH_MEDIA_TYPE = "application/json-patch+json"

# server defaults
CONFIG_FILE = Path("/etc/docpatch/config.yaml")
DEFAULT_LISTEN_HOST = "127.0.0.1"
DEFAULT_LISTEN_PORT = 5380
DEFAULT_LOGLEVEL = "notice"
DEFAULT_LOGTARGET = "stderr"

# environment variables
NO_PREFIX_FORMAT_ENV_VAR = "DOCPATCH_LOGGING_NO_PREFIX_FORMAT"
