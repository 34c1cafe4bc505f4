"""Profile page state machine.

The controller keeps a derived copy of the user's profile (`form`) and drives
it through the profile API:

    IDLE -> LOADING -> READY | LOAD_ERROR
    READY -> SUBMITTING -> READY        (name edit, no rollback on failure)
    READY -> ROLE_UPDATING -> READY     (optimistic role change, rollback on failure)

Every successful write is followed by a session refresh and a fresh profile
fetch; the form is then overwritten from that fetch, except for a field that
another action confirmed later. Submit and role change are gated
independently, each one is serialized against itself.
"""
import asyncio
import itertools
from dataclasses import dataclass, field, replace
from enum import Enum

import structlog

from ...domain.entities import Role, UserProfile
from .api import ApiError, ProfileApiClient
from .session import SessionStore

logger = structlog.get_logger(__name__)


class ViewStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    LOAD_ERROR = "load_error"
    SUBMITTING = "submitting"
    ROLE_UPDATING = "role_updating"


class ActionRejected(RuntimeError):
    """The control that triggers this action is disabled right now."""


class ActionInProgress(ActionRejected):
    pass


@dataclass
class FormData:
    name: str = ""
    email: str = ""
    role: Role = Role.STUDENT

    @classmethod
    def from_profile(cls, profile: UserProfile) -> "FormData":
        return cls(name=profile.name, email=profile.email, role=profile.role)


_notification_ids = itertools.count(1)


@dataclass
class Notification:
    kind: str
    message: str
    id: int = field(default_factory=lambda: next(_notification_ids))


class ProfileViewController:
    def __init__(self, api: ProfileApiClient, session: SessionStore):
        self.api = api
        self.session = session
        self.form = FormData()
        self.error: str | None = None
        self.is_editing = False
        self.submit_pending = False
        self.role_pending = False
        self.notifications: list[Notification] = []
        self._phase = ViewStatus.IDLE
        self._mounted = False
        # bumped on every confirmed write, so an older fetch cannot overwrite a newer value
        self._role_version = 0
        self._name_version = 0

    @property
    def status(self) -> ViewStatus:
        if self._phase is not ViewStatus.READY:
            return self._phase
        if self.role_pending:
            return ViewStatus.ROLE_UPDATING
        if self.submit_pending:
            return ViewStatus.SUBMITTING
        return ViewStatus.READY

    @property
    def is_loading(self) -> bool:
        return self._phase is ViewStatus.LOADING

    @property
    def can_submit(self) -> bool:
        return self._phase is ViewStatus.READY and self.is_editing and not self.submit_pending

    @property
    def can_change_role(self) -> bool:
        return self._phase is ViewStatus.READY and not self.role_pending

    def _notify(self, kind: str, message: str) -> None:
        if self._mounted:
            self.notifications.append(Notification(kind, message))

    def dismiss(self, notification_id: int) -> None:
        self.notifications = [n for n in self.notifications if n.id != notification_id]

    def _fail(self, message: str) -> None:
        if self._mounted:
            self.error = message
            self._notify("error", message)

    async def mount(self) -> bool:
        if self.is_loading:
            raise ActionInProgress("Profile is already loading")
        self._mounted = True
        self._phase = ViewStatus.LOADING
        self.error = None

        try:
            if self.session.current_identity() is None:
                await self.session.load()
            role, profile = await asyncio.gather(self.api.get_role(), self.api.get_profile())
        except ApiError as e:
            if self._mounted:
                self._phase = ViewStatus.LOAD_ERROR
                self._fail(e.message)
            return False

        if not self._mounted:
            return False
        self.form = FormData.from_profile(replace(profile, role=role))
        self._phase = ViewStatus.READY
        return True

    def unmount(self) -> None:
        """Detaches the view; responses still in flight are ignored."""
        self._mounted = False

    def start_editing(self) -> None:
        if self._phase is not ViewStatus.READY:
            raise ActionRejected("Profile is not loaded")
        self.is_editing = True

    def cancel_editing(self) -> None:
        self.is_editing = False

    def set_name(self, value: str) -> None:
        self.form = replace(self.form, name=value)

    async def submit(self) -> bool:
        if not self.is_editing:
            raise ActionRejected("Not in edit mode")
        if self._phase is not ViewStatus.READY:
            raise ActionRejected("Profile is not loaded")
        if self.submit_pending:
            raise ActionInProgress("Profile update already in progress")

        self.submit_pending = True
        self.error = None
        name = self.form.name
        role_version = self._role_version
        try:
            try:
                await self.api.update_profile(name)
            except ApiError as e:
                # the typed name stays in the form so the user can retry
                self._fail(e.message)
                return False
            self._name_version += 1

            try:
                await self.session.refresh({"name": name.strip()})
                profile = await self.api.get_profile()
            except ApiError as e:
                # the name was saved; only the resync failed
                if self._mounted:
                    self.form = replace(self.form, name=name.strip())
                    self.is_editing = False
                    self._fail(e.message)
                return True
        finally:
            self.submit_pending = False

        if not self._mounted:
            return False
        fetched = FormData.from_profile(profile)
        if self.role_pending or self._role_version != role_version:
            # a role change confirmed after this fetch was taken
            fetched = replace(fetched, role=self.form.role)
        self.form = fetched
        self.is_editing = False
        self.error = None
        self._notify("success", "Profile updated successfully")
        return True

    async def change_role(self, new_role) -> bool:
        if self._phase is not ViewStatus.READY:
            raise ActionRejected("Profile is not loaded")
        if self.role_pending:
            raise ActionInProgress("Role update already in progress")
        try:
            role = Role.parse(new_role)
        except ValueError:
            self._fail("Invalid role value")
            return False

        previous = self.form.role
        if role is previous:
            return True

        self.role_pending = True
        self.error = None
        self.form = replace(self.form, role=role)
        name_version = self._name_version
        try:
            try:
                confirmed = await self.api.update_role(role)
            except ApiError as e:
                if self._mounted:
                    self.form = replace(self.form, role=previous)
                    self._fail(e.message)
                logger.info("role_change_reverted", previous=previous.value, attempted=role.value)
                return False
            self._role_version += 1

            try:
                await self.session.refresh({"role": confirmed.role.value})
                profile = await self.api.get_profile()
            except ApiError as e:
                # the write landed; fall back to the role the server echoed
                if self._mounted:
                    self.form = replace(self.form, role=confirmed.role)
                    self._fail(e.message)
                return True
        finally:
            self.role_pending = False

        if self._mounted:
            fetched = FormData.from_profile(profile)
            if self.is_editing or self.submit_pending or self._name_version != name_version:
                # keep the name being edited, or the one a newer save produced
                fetched = replace(fetched, name=self.form.name)
            self.form = fetched
            self._notify("success", "Role updated successfully")
        return True
