"""Database table name constants and type references."""

# Table names — single source of truth for Supabase queries
USERS = "users"
CHATS = "chats"
MESSAGES = "messages"

# Role constants
ROLE_USER = "user"
ROLE_ASSISTANT = "assistant"
