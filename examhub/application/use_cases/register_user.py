from ...domain.entities import Role, UserProfile
from ..dto import RegisterUserInput
from ..errors import InvalidInput
from ..ports import IUserRepository, IPasswordHasher

MIN_PASSWORD_LENGTH = 8


class RegisterUser:
    def __init__(self, repo: IUserRepository, hasher: IPasswordHasher):
        self.repo = repo
        self.hasher = hasher

    def execute(self, data: RegisterUserInput) -> UserProfile:
        email = data.email.strip().lower()
        if "@" not in email:
            raise InvalidInput("Invalid email")
        if len(data.password) < MIN_PASSWORD_LENGTH:
            raise InvalidInput(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        if self.repo.get_by_email(email):
            raise InvalidInput("Email already registered")
        name = (data.name or "").strip() or email.split("@", 1)[0]
        pwd_hash = self.hasher.hash(data.password)
        # new accounts always start as students
        return self.repo.create(email, name, pwd_hash, role=Role.STUDENT)
