"""Persisted key names and database defaults."""

# Serialized account-minus-credential record for the logged-in user.
SESSION_MIRROR_KEY = "user"

# Serialized list of every registered account, credentials included.
ACCOUNT_COLLECTION_KEY = "users"

DEFAULT_DATABASE_URL = "sqlite:///./skintrack.db"
