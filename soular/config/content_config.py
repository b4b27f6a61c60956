"""
Content Configuration
Enumerations accepted by the film, forum and settings endpoints.
"""

FILM_CATEGORIES = [
    "Dokumenter",
    "Drama",
    "Eksperimental",
    "Musikal",
    "Thriller",
    "Horor",
    "Komedi",
    "Petualangan",
]

FORUM_CATEGORIES = ["general", "filmmaking", "technical", "showcase", "feedback", "events", "other"]

# sort parameter -> column, ordered descending
FORUM_SORT_COLUMNS = {
    "latest": "last_activity_at",
    "popular": "view_count",
    "most_replies": "reply_count",
}

FORUM_TITLE_MAX = 200
FORUM_DISCUSSION_CONTENT_MAX = 10000
FORUM_POST_CONTENT_MAX = 5000
FORUM_MAX_TAGS = 5

# user_settings validation
SETTINGS_THEMES = ["light", "dark", "system"]
SETTINGS_LANGUAGES = ["id", "en"]
SETTINGS_EMAIL_DIGESTS = ["never", "daily", "weekly"]
POSTS_PER_PAGE_RANGE = (10, 100)
DIGEST_DAY_RANGE = (0, 6)

BILLING_CYCLES = ["monthly", "yearly"]
