# loverituals/constants.py
# Identifier alphabets, prefixes and allowed sort fields

import string

# Public share ids: letters, digits and two URL-safe symbols
SHARE_ID_ALPHABET: str = string.ascii_letters + string.digits + "_-"

# Internal ids: lowercase only, prefixed by record kind
RECORD_ID_ALPHABET: str = string.ascii_lowercase + string.digits
CONFIG_ID_PREFIX: str = "cfg_"
CATEGORY_ID_PREFIX: str = "cat_"

# Redis key prefix for tool catalog reads
TOOLS_CACHE_PREFIX: str = "api:tools"

# Column names exposed to ?sortBy=... mapped from their API spelling
CATEGORY_SORT_FIELDS: dict[str, str] = {
    "name": "name",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}

CATEGORY_TOOL_SORT_FIELDS: dict[str, str] = {
    "toolName": "tool_name",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}

DEFAULT_PAGE_SIZE: int = 20
MAX_PAGE_SIZE: int = 100
