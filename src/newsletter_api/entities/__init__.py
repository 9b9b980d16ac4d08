"""Domain entities for internal representation.

These are pure dataclasses (frozen) and enums used by services and
repositories. They are NOT used for API contracts - use DTOs from the dto
package for that.
"""

from .cache_read import CacheOrigin, CacheRead
from .cooldown import Blocked, CooldownDecision, Ready
from .identity_claims import EMAIL_CONFIRM_PURPOSE, SESSION_PURPOSE, AuthError, IdentityClaims
from .request_context import RequestContext

__all__ = [
    "AuthError",
    "Blocked",
    "CacheOrigin",
    "CacheRead",
    "CooldownDecision",
    "EMAIL_CONFIRM_PURPOSE",
    "IdentityClaims",
    "Ready",
    "RequestContext",
    "SESSION_PURPOSE",
]
