from __future__ import annotations

from typing import Final

# Discord limits
MAX_EMBED_DESCRIPTION: Final[int] = 4096
MAX_EMBED_TITLE: Final[int] = 256

# Colors (hex values)
COLORS = {
    "default": 0x5865F2,
    "error": 0xED4245,
    "info": 0x3498DB,
}

# Error messages
ERROR_MESSAGES = {
    "not_operator": "Only the operator can manage voice moderation.",
    "volume_unavailable": "Volume control is not ready yet. Try again in a moment.",
    "unexpected": "Something went wrong running that command.",
}
