from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    ADMIN = "ADMIN"
    TEACHER = "TEACHER"
    STUDENT = "STUDENT"

    @classmethod
    def parse(cls, value) -> "Role":
        """Boundary parsing for externally supplied role strings.

        Raises ValueError for anything outside the three variants.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Unknown role: {value!r}")


@dataclass(frozen=True)
class UserProfile:
    id: int | None
    email: str
    name: str
    role: Role = Role.STUDENT

    def public(self) -> dict:
        return {"id": self.id, "email": self.email, "name": self.name, "role": self.role.value}
