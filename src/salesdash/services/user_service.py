from __future__ import annotations

import logging

from salesdash.domain.forms import ProfileForm, validate_form
from salesdash.domain.models import User
from salesdash.domain.normalize import user_from_api, users_from_api

log = logging.getLogger(__name__)


class UserService:
    def __init__(self, api, session=None):
        self.api = api
        self.session = session

    def list(self) -> list[User]:
        return users_from_api(self.api.get("/users"))

    def get_profile(self) -> User:
        return user_from_api(self.api.get("/users/profile") or {})

    def update_profile(self, user_id: int, data: dict) -> User:
        form = validate_form(ProfileForm, data)
        user = user_from_api(self.api.patch(f"/users/{int(user_id)}", json=form.to_payload()) or {})
        if self.session is not None:
            self.session.set_user(user)
        log.info("profile_updated user_id=%s password_changed=%s", user_id, form.changes_password)
        return user
