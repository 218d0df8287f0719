# key_rotator/constants.py

GITHUB_API_URL = "https://api.github.com"
GITHUB_ACCEPT = "application/vnd.github+json"
GITHUB_API_VERSION = "2022-11-28"
USER_AGENT = "VirtualFinland.KeyRotator"
DEFAULT_TIMEOUT_SECONDS = 10.0

REPOSITORY_PAGE_SIZE = 100

# Field of the Secrets Manager JSON blob holding the bot token
GITHUB_TOKEN_FIELD = "CICD_BOT_GITHUB_ACCESS_TOKEN"
SECRET_VERSION_STAGE = "AWSCURRENT"

ACCESS_KEY_ID_SECRET_NAME = "AWS_ACCESS_KEY_ID"
SECRET_ACCESS_KEY_SECRET_NAME = "AWS_SECRET_ACCESS_KEY"

# IAM allows at most two keys per user
MAX_ACCESS_KEYS = 2

DEFAULT_ORGANIZATION_NAME = "Virtual-Finland-Development"
