"""User accounts, groups and preferences behind session-checked bearer tokens."""
