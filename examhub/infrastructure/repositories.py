from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from .models import UserORM
from .metrics import db_queries_total
from ..domain.entities import Role, UserProfile
from ..application.errors import InternalError
from ..application.ports import IUserRepository

# columns a profile update is allowed to touch; email and id stay fixed
MUTABLE_FIELDS = ("name", "role")

def to_domain(u: UserORM) -> UserProfile:
    return UserProfile(id=u.id, email=u.email, name=u.name, role=Role.parse(u.role))

class UserRepository(IUserRepository):
    def __init__(self, db: Session): self.db = db

    def _by_id(self, user_id: int) -> UserORM | None:
        db_queries_total.inc()
        return self.db.query(UserORM).filter(UserORM.id == user_id).first()

    def get_by_id(self, user_id: int) -> UserProfile | None:
        row = self._by_id(user_id)
        return to_domain(row) if row else None

    def get_by_email(self, email: str) -> UserProfile | None:
        db_queries_total.inc()
        row = self.db.query(UserORM).filter(UserORM.email == email).first()
        return to_domain(row) if row else None

    def get_password_hash(self, email: str) -> tuple[UserProfile, str] | None:
        db_queries_total.inc()
        row = self.db.query(UserORM).filter(UserORM.email == email).first()
        if not row or not row.is_active:
            return None
        return to_domain(row), row.password_hash

    def create(self, email: str, name: str, password_hash: str, role: Role = Role.STUDENT) -> UserProfile:
        row = UserORM(email=email, name=name, password_hash=password_hash, role=Role.parse(role).value)
        try:
            self.db.add(row); self.db.commit(); self.db.refresh(row)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise InternalError("Failed to persist user") from e
        return to_domain(row)

    def update(self, user_id: int, **fields) -> UserProfile | None:
        unknown = set(fields) - set(MUTABLE_FIELDS)
        if unknown:
            raise ValueError(f"Immutable or unknown fields: {sorted(unknown)}")
        row = self._by_id(user_id)
        if not row:
            return None
        if "name" in fields: row.name = fields["name"]
        if "role" in fields: row.role = Role.parse(fields["role"]).value
        try:
            self.db.commit(); self.db.refresh(row)
        except SQLAlchemyError as e:
            self.db.rollback()
            raise InternalError("Failed to persist user") from e
        return to_domain(row)
