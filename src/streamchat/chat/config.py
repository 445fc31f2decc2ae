"""Chat pipeline constants.

Centralizes the user-facing strings and thresholds used by the session,
the segment parser and the scroll-follow policy.
"""

# Scroll-follow configuration
SCROLL_FOLLOW_TOLERANCE = 50  # Viewport units between viewport bottom and content bottom

# Segment parser configuration
DEFAULT_CODE_LANGUAGE = "plaintext"  # Used when a fence has no language token
FENCE = "```"

# User-facing messages
WELCOME_TEXT = "Hello, I'm Gemini. How can I help you today?"
APOLOGY_TEXT = "I'm sorry, I encountered an error. Please try again."
CANCELLED_TEXT = "Response cancelled."
