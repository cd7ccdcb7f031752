from __future__ import annotations

import logging

from salesdash.domain.errors import ApiError
from salesdash.domain.forms import LoginForm, RegisterForm, validate_form
from salesdash.domain.models import User
from salesdash.domain.normalize import user_from_api

log = logging.getLogger(__name__)


class AuthService:
    def __init__(self, api, session):
        self.api = api
        self.session = session

    def login(self, email: str, password: str) -> User:
        form = validate_form(LoginForm, {"email": email, "password": password})
        self.session.set_error(None)
        self.session.set_loading(True)
        try:
            data = self.api.post("/auth/login", json=form.to_payload())
            if not isinstance(data, dict) or not data.get("access_token"):
                raise ApiError("Login response missing access token.")
        except ApiError as e:
            self.session.set_error(str(e))
            raise
        finally:
            self.session.set_loading(False)

        user = user_from_api(data.get("user") or {})
        self.session.login(str(data["access_token"]), user)
        log.info("login_ok user_id=%s", user.id)
        return user

    def register(self, name: str, email: str, password: str, confirm_password: str) -> str:
        form = validate_form(
            RegisterForm,
            {"name": name, "email": email, "password": password, "confirm_password": confirm_password},
        )
        data = self.api.post("/auth/register", json=form.to_payload())
        log.info("register_ok email=%s", form.email)
        if isinstance(data, dict) and data.get("message"):
            return str(data["message"])
        return "Usuario registrado correctamente"

    def get_profile(self) -> User:
        user = user_from_api(self.api.get("/users/profile") or {})
        self.session.set_user(user)
        return user

    def logout(self) -> None:
        self.session.logout()
