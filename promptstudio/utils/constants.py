"""
Application constants - limits, durations and user-facing messages.
"""

# Subscription
SUBSCRIPTION_FREE = "free"
SUBSCRIPTION_PREMIUM = "premium"

FREE_PROMPT_LIMIT = 5
PREMIUM_SUBSCRIPTION_DAYS = 90
PREMIUM_SUBSCRIPTION_YEARS = 1  # admin toggle

# Prompts
PROMPT_TRUNCATE_LENGTH = 200
MAX_TITLE_LENGTH = 255
MAX_CUSTOM_CRITERIA_LENGTH = 200

# Files
MAX_FILENAME_LENGTH = 255
FILENAME_EXTENSION_LENGTH = 4  # ".txt"

# Admin
ADMIN_USERS_PAGE_SIZE = 20
ANALYTICS_DEFAULT_DAYS = 30

# Analytics event types
EVENT_LOGIN = "login"
EVENT_FRAMEWORK_VIEW = "framework_view"
EVENT_PROMPT_GENERATE = "prompt_generate"
EVENT_PROMPT_SAVE = "prompt_save"
EVENT_PASSWORD_CHANGED = "password_changed"

ERROR_MESSAGES = {
    "auth": {
        "all_fields_required": "All fields are required",
        "email_already_registered": "Email already registered",
        "email_password_required": "Email and password are required",
        "invalid_credentials": "Invalid email or password",
        "password_mismatch": "Passwords do not match",
        "session_expired": "Your session has expired. Please log in again.",
    },
    "account": {
        "current_password_required": "Current password is required",
        "current_password_incorrect": "Current password is incorrect",
        "new_password_required": "New password is required",
        "new_password_same": "New password must be different from current password",
        "password_changed": "Password changed successfully",
    },
    "prompts": {
        "not_found": "Prompt not found",
        "export_premium_only": "Exporting prompts is a premium feature. Upgrade to access this feature.",
        "limit_reached": "You've reached the free plan limit of {limit} saved prompts. "
                         "Upgrade to premium for unlimited prompts.",
        "title_required": "Title is required",
    },
    "frameworks": {
        "not_found": "Framework not found",
    },
    "criteria": {
        "premium_only": "Custom criteria are a premium feature",
        "name_required": "Criteria name is required",
        "too_long": "Criteria name must be 200 characters or less",
        "duplicate": "This criteria already exists",
        "not_found": "Criteria not found",
    },
}
