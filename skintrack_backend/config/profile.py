"""Profile and account defaults that are tracked in Git."""

# Title every new account starts with.
DEFAULT_TITLE = "Glow Seeker"

# Account fabricated on first start so the app works without a signup step.
DEMO_ACCOUNT_EMAIL = "user@demo.com"
DEMO_ACCOUNT_NAME = "Demo User"

# Goal chips in the order the profile page displays them.
GOAL_CATALOG = (
    "Hydration",
    "Anti-aging",
    "Brightening",
    "Acne Control",
    "Dark Spots",
    "Pore Minimizing",
    "Oil Control",
    "Sensitive Skin",
)
