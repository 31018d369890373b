HTTP_STATUS_CODES = {
    "OK": 200,
    "CREATED": 201,
    "ACCEPTED": 202,
    "BAD_REQUEST": 400,
    "UNAUTHORIZED": 401,
    "FORBIDDEN": 403,
    "NOT_FOUND": 404,
    "VALIDATION_ERROR": 422,
    "INTERNAL_SERVER_ERROR": 500,
    "BAD_GATEWAY": 502,
    "SERVICE_UNAVAILABLE": 503,
}

ERROR_MESSAGES = {
    "POST_NOT_FOUND": "Post not found",
    "NO_ACCOUNTS_SELECTED": "No accounts selected for this post",
    "ACCOUNTS_NOT_FOUND": "Social accounts not found",
    "ACCOUNT_NOT_FOUND": "Social account not found",
    "QUEUE_UNAVAILABLE": "Publishing queue is unavailable. Please try again later.",
    "POST_LOAD_FAILED": "Failed to load post",
    "ACCOUNTS_LOAD_FAILED": "Failed to load social accounts",
}
