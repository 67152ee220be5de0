"""Shared constants for Discord client components."""

# Embed colors (Discord color values)
EMBED_COLOR_ERROR = 0xE74C3C
EMBED_COLOR_INFO = 0x3498DB
EMBED_COLOR_SUCCESS = 0x2ECC71
EMBED_COLOR_UPTIME = 0x00FF00

# Attachment ceiling when the guild does not allow more (boosted servers do)
DEFAULT_ATTACHMENT_LIMIT_BYTES = 10 * 1024 * 1024
MEDIA_DOWNLOAD_TIMEOUT_SECONDS = 30

# Channel and role names
RAPI_BOT_CHANNEL = "rapi-bot"
WELCOME_CHANNEL = "welcome"
NIKKE_CHANNEL = "nikke"
GROUNDED_ROLE = "Grounded"
MOD_ROLES: frozenset[str] = frozenset({"mods", "king"})

# Spam handling
SPAM_TIMEOUT_SECONDS = 300
WARNING_DELETE_AFTER_SECONDS = 5.0

# Interval for dropping stale hourly quota buckets
QUOTA_CLEANUP_INTERVAL_SECONDS = 15 * 60

COMMAND_PREFIX = "/"

CHAT_ERROR_REPLY = (
    "Commander, I think there is something wrong with me... "
    "(something broke, please ping a moderator to check what is going on)"
)
