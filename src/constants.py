"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    CONNECTION_ERROR = 2
    METADATA_ERROR = 3
    INPUT_ERROR = 4


class DependencyKinds(Enum):
    """Dependency kinds found in registry index records.

    Args:
        Enum (string): Raw ``kind`` values used by the index.
    """

    NORMAL = "normal"
    DEV = "dev"
    BUILD = "build"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    REGISTRY_URL = "https://lib.rs/registry-proxy/"
    USER_AGENT = "cratescout/0.1 (+https://lib.rs)"
    CONNECT_TIMEOUT = 10  # seconds to establish a connection
    REQUEST_TIMEOUT = 20  # seconds to wait for the response
    RESULT_CHANNEL_SIZE = 99
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
    ENV_LOG_LEVEL = "CRATESCOUT_LOG_LEVEL"
    CONFIG_SECTION = "cratescout"

    DEFAULT_FEATURE = "default"
    ANY_VERSION = "*"
