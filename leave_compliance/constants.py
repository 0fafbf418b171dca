"""
Service-wide constants
"""

SERVICE_NAME = "leave-compliance-service"

# Feature flag every leave route is gated on
LEAVE_FEATURE = "leave_management"

# Pagination
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
