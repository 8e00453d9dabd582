# Centralized collection names to prevent drift.

COL_SYSTEM = "system"
DOC_HEALTHZ = "healthz"

COL_ITEMS = "items"
COL_REGIONS = "regions"
COL_ADMINS = "admins"  # admins/{uid} -> {"isAdmin": true}
COL_AUTH_SESSIONS = "auth_sessions"  # auth_sessions/{sha256(token)}

# Stored field names (shared with the browser client, hence camelCase).
FIELD_IS_ADMIN = "isAdmin"
FIELD_REGION_ID = "regionId"
FIELD_APPROVED = "approved"
