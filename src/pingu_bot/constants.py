"""Presentation constants shared by the built-in commands and the dispatcher."""

COLORS = {
    "SUCCESS": 0x57F287,
    "ERROR": 0xED4245,
    "WARNING": 0xFEE75C,
    "INFO": 0x5865F2,
}

CATEGORY_EMOJI = {
    "games": "🎮",
    "economy": "🪙",
    "leveling": "⬆️",
    "fun": "🎉",
    "utility": "🔧",
}
DEFAULT_CATEGORY_EMOJI = "📁"

PRESENCE_TEXT = "with penguins 🐧"

COOLDOWN_MESSAGE = "⏰ Please wait {remaining:.1f} more second(s) before using `{name}` again."
FAILURE_MESSAGE = "❌ An error occurred while executing this command."
