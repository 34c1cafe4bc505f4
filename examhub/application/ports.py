from ..domain.entities import Role, UserProfile


class IUserRepository:
    def get_by_id(self, user_id: int) -> UserProfile | None: ...
    def get_by_email(self, email: str) -> UserProfile | None: ...
    def get_password_hash(self, email: str) -> tuple[UserProfile, str] | None: ...
    def create(self, email: str, name: str, password_hash: str, role: Role = Role.STUDENT) -> UserProfile: ...
    def update(self, user_id: int, **fields) -> UserProfile | None: ...


class IPasswordHasher:
    def hash(self, plain: str) -> str: ...
    def verify(self, plain: str, hashed: str) -> bool: ...


class IProfileCache:
    def get(self, user_id: int) -> UserProfile | None: ...
    def put(self, profile: UserProfile) -> None: ...
    def invalidate(self, user_id: int) -> None: ...


class NullProfileCache(IProfileCache):
    def get(self, user_id: int) -> UserProfile | None:
        return None

    def put(self, profile: UserProfile) -> None:
        pass

    def invalidate(self, user_id: int) -> None:
        pass
