from ...domain.entities import UserProfile
from ..errors import Unauthorized
from ..ports import IUserRepository, IPasswordHasher


class AuthenticateUser:
    def __init__(self, repo: IUserRepository, hasher: IPasswordHasher):
        self.repo = repo
        self.hasher = hasher

    def execute(self, email: str, password: str) -> UserProfile:
        found = self.repo.get_password_hash(email.strip().lower())
        if not found:
            raise Unauthorized("Invalid credentials")
        user, password_hash = found
        if not self.hasher.verify(password, password_hash):
            raise Unauthorized("Invalid credentials")
        return user
