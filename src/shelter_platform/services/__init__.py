"""
shelter_platform.services

Service layer.

Responsibilities:
- Multi-step operations that span repositories (identity sync, memberships).
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services flush but never commit; routers/dependencies own the transaction.
