"""Constants for the Google Drive v3 API."""

# Scope alias accepted by Drive for the user's "My Drive" root folder
ROOT_SCOPE = "root"

MAX_PAGE_SIZE = 1000

# Only the fields the fetcher needs; keeps responses small
LIST_FIELDS = "nextPageToken, files(id, name, mimeType, size)"

# MIME types
FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"
GOOGLE_APPS_MIME_PREFIX = "application/vnd.google-apps."

# File extension appended to exported documents, keyed by export MIME type
EXPORT_EXTENSIONS = {
    "application/pdf": ".pdf",
    "text/plain": ".txt",
    "text/csv": ".csv",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": ".docx",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": ".xlsx",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation": ".pptx",
}

# HTTP status codes
STATUS_UNAUTHORIZED = 401
STATUS_FORBIDDEN = 403
STATUS_NOT_FOUND = 404
STATUS_TOO_MANY_REQUESTS = 429

# 403 reasons Drive uses for rate limiting rather than authorization failures
RATE_LIMIT_REASONS = frozenset({
    "rateLimitExceeded",
    "userRateLimitExceeded",
    "sharingRateLimitExceeded",
})

# 403 reasons meaning the credential itself lacks access (scope, revoked grant)
CREDENTIAL_REASONS = frozenset({
    "authError",
    "insufficientPermissions",
})
