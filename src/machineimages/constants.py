"""Constants for machineimages.  Overrideable for testing."""

from pathlib import Path

CONFIG_FILE = Path("/etc/machineimages/config.yaml")
ENV_PREFIX = "MACHINEIMAGES_"
ALERT_HOOK_ENV_VAR = f"{ENV_PREFIX}ALERT_HOOK"
CONFIG_FILE_ENV_VAR = f"{ENV_PREFIX}CONFIG_FILE"
ROOT_LOGGER = "machineimages"

DISTINGUISHED_OS_NAME = "GardenLinux"
"""OS name that is always sorted to the front of the computed images."""

VERSION_KEY = "version"
CLASSIFICATION_KEY = "classification"
