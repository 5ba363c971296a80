"""Constants and default values used across the application."""

# Declaration file keys (compared after all whitespace is removed from a line)
APP_NAME_PREFIX = "app_name="
CONTAINER_VERSION_PREFIX = "container_version="

# Environment variable block delimiters (compared after whitespace is removed)
ENV_BLOCK_OPEN = "environment_vars={"
ENV_BLOCK_CLOSE = "}"

# Characters stripped from env block lines before splitting key and value
ENV_LINE_STRIP_CHARS = '",'

# Directory layout below the root passed on the command line
DEFAULT_LAYOUT = "Terraform/Environments/{env}/workload"
DEFAULT_PROD_ENV = "prod"
DEFAULT_STAGE_ENV = "stage"

# Config file names
CONFIG_DIR_NAME = "deploy-drift"
LOCAL_CONFIG_NAME = ".deploy-drift.toml"
