from ...domain.entities import Role
from ..dto import SessionContext
from ..ports import IUserRepository
from .profile import GetRole

DASHBOARD_SECTIONS: dict[Role, list[str]] = {
    Role.ADMIN: ["users", "exams", "reports"],
    Role.TEACHER: ["recent_exams", "exam_categories", "student_results", "create_exam"],
    Role.STUDENT: ["upcoming_exams", "previous_exams", "recent_results"],
}


class GetDashboard:
    def __init__(self, repo: IUserRepository):
        self.get_role = GetRole(repo)

    def execute(self, session: SessionContext | None) -> dict:
        role = self.get_role.execute(session)
        return {
            "role": role,
            "view": role.value.lower(),
            "sections": list(DASHBOARD_SECTIONS[role]),
        }
