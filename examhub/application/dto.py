from dataclasses import dataclass

from ..domain.entities import Role


@dataclass
class RegisterUserInput:
    email: str
    password: str
    name: str | None = None


@dataclass(frozen=True)
class SessionContext:
    """Request-scoped proof of an authenticated principal.

    Built from verified token claims; `user_id` is the canonical key used
    to address the user record.
    """
    user_id: int
    email: str
    name: str
    role: Role

    @classmethod
    def from_claims(cls, claims: dict) -> "SessionContext | None":
        try:
            user_id = int(claims["sub"])
            role = Role.parse(claims.get("role", Role.STUDENT))
        except (KeyError, TypeError, ValueError):
            return None
        return cls(
            user_id=user_id,
            email=claims.get("email", ""),
            name=claims.get("name", ""),
            role=role,
        )
