"""Authentication context for bearer-authenticated requests."""

from dataclasses import dataclass


@dataclass
class AuthenticatedUserContext:
    """Identity extracted from a verified Supabase access token."""

    user_id: str
    email: str | None = None

    def __post_init__(self):
        if not self.user_id:
            raise ValueError("User id is required in authentication context")
