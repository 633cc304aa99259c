"""
Exit codes for the taskchat CLI.

Scripts can use these codes to tell a bad invocation apart from a missing
backend.
"""

SUCCESS = 0

# General error (unspecified)
ERROR_GENERAL = 1

# Invalid arguments or validation error
ERROR_INVALID_ARGS = 2

# No task indexing backend answered
ERROR_BACKEND_UNAVAILABLE = 4
