"""Exit codes used by the CLI."""

SYSTEM_EXIT_CODE = 1
VALIDATION_EXIT_CODE = 2
STORAGE_EXIT_CODE = 3
