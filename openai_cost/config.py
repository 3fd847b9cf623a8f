#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
config.py

Configuration constants and defaults for the openai-cost tool.

Every value that a user might reasonably want to change without touching code
is read from the environment here, once, at import time. The rest of the
package imports these names instead of calling os.getenv on its own.
"""

import os

# ---------------------------------------------------------------------
# Costs API
# ---------------------------------------------------------------------
# API_BASE_URL:
# - Root of the REST API. The costs endpoint is appended to it.
# - Can be overridden via OPENAI_COST_BASE_URL (e.g. for a proxy).
API_BASE_URL = os.getenv("OPENAI_COST_BASE_URL", "https://api.openai.com/v1")

# COSTS_ENDPOINT:
# - Path (relative to API_BASE_URL) of the organization costs listing.
COSTS_ENDPOINT = "organization/costs"

# ADMIN_KEY_ENV:
# - Name of the environment variable holding the admin API key.
# - The key itself is never stored in this module.
ADMIN_KEY_ENV = "OPENAI_ADMIN_KEY"

# ---------------------------------------------------------------------
# HTTP timeouts (seconds)
# ---------------------------------------------------------------------
# A deadline is the transport's concern; expiry surfaces as a transport failure.
HTTP_TIMEOUT = float(os.getenv("OPENAI_COST_TIMEOUT", "60"))
HTTP_CONNECT_TIMEOUT = float(os.getenv("OPENAI_COST_CONNECT_TIMEOUT", "10"))

# ---------------------------------------------------------------------
# Query defaults / limits
# ---------------------------------------------------------------------
# The costs endpoint currently only accepts daily buckets.
DEFAULT_BUCKET_WIDTH = "1d"
SUPPORTED_BUCKET_WIDTHS = ("1d",)

# Buckets per page. The server accepts 1..180.
DEFAULT_LIMIT = 7
MIN_LIMIT = 1
MAX_LIMIT = 180

# Dimensions the server can split a bucket's cost along.
GROUP_BY_FIELDS = ("project_id", "line_item")

# CLI --start-time values below this are "days ago", otherwise Unix timestamps.
DAYS_AGO_THRESHOLD = 1000

# ---------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------
DEFAULT_LOG_LEVEL = os.getenv("OPENAI_COST_LOG_LEVEL", "WARNING")
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"
