"""
shelter_platform.auth

Authentication/authorization package.

Responsibilities:
- Identity token verification (shared secret or identity-provider JWKS).
- Role resolution and tenant (shelter) context resolution.
- The authorization gate and its FastAPI dependencies.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Pipeline order per request: identity -> user sync -> tenant -> gate.
