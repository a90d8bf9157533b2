from __future__ import annotations

# Every `gh api` call, read or write
GH_TIMEOUT_SECONDS = 60.0

# Reads (GET) only; the delay grows linearly with each attempt
GH_READ_RETRY_ATTEMPTS = 3
GH_READ_RETRY_DELAY_SECONDS = 1.0
