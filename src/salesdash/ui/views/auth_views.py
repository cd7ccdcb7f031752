from __future__ import annotations

import logging
import tkinter as tk
from tkinter import ttk

from salesdash.application import routing
from salesdash.domain.errors import ValidationError
from salesdash.ui.views.base import BaseView

log = logging.getLogger(__name__)


class LoginView(BaseView):
    def __init__(self, notebook: ttk.Notebook, app):
        super().__init__(notebook, app, "Login")

        box = ttk.LabelFrame(self.frame, text="Iniciar sesión")
        box.pack(padx=40, pady=60)

        self.email = self._entry(box, "Email", 0, "email")
        self.password = self._entry(box, "Contraseña", 1, "password", show="*")

        self.submit_btn = ttk.Button(box, text="Iniciar sesión", style="Big.TButton", command=self.submit)
        self.submit_btn.grid(row=4, column=0, columnspan=2, sticky="ew", padx=8, pady=(12, 4))
        ttk.Button(box, text="Crear una cuenta", command=lambda: self.app.navigate(routing.REGISTER))\
            .grid(row=5, column=0, columnspan=2, sticky="ew", padx=8, pady=(0, 8))

        self._banner(self.frame)
        for e in (self.email, self.password):
            e.bind("<Return>", lambda _e: self.submit())

    def reset_controls(self):
        self.submit_btn.state(["!disabled"])

    def refresh(self):
        self.clear_errors()
        self.password.delete(0, tk.END)
        self.email.focus_set()

    def submit(self):
        self.clear_errors()
        email, password = self.email.get(), self.password.get()
        self.submit_btn.state(["disabled"])
        self.app.run_async(
            self.lifecycle,
            lambda: self.app.container.auth.login(email, password),
            self._on_logged_in,
            self._on_failed,
            operation="login",
        )

    def _on_logged_in(self, user):
        self.submit_btn.state(["!disabled"])
        self.app.toast(f"Bienvenido, {user.name}.", kind="success")
        self.app.navigate(routing.DASHBOARD)

    def _on_failed(self, err: Exception):
        self.submit_btn.state(["!disabled"])
        if isinstance(err, ValidationError):
            self.show_validation(err)
            return
        # a rejected login is a credentials problem, not an expired session
        status = getattr(err, "status", None)
        log.warning("login_failed status=%s error=%s", status, err)
        self.banner_var.set(str(err) if status else "Error al iniciar sesión")


class RegisterView(BaseView):
    def __init__(self, notebook: ttk.Notebook, app):
        super().__init__(notebook, app, "Register")

        box = ttk.LabelFrame(self.frame, text="Crear cuenta")
        box.pack(padx=40, pady=40)

        self.name = self._entry(box, "Nombre", 0, "name")
        self.email = self._entry(box, "Email", 1, "email")
        self.password = self._entry(box, "Contraseña", 2, "password", show="*")
        self.confirm = self._entry(box, "Confirmar contraseña", 3, "confirm_password", show="*")

        ttk.Button(box, text="Registrarse", style="Big.TButton", command=self.submit)\
            .grid(row=8, column=0, columnspan=2, sticky="ew", padx=8, pady=(12, 4))
        ttk.Button(box, text="Ya tengo cuenta", command=lambda: self.app.navigate(routing.LOGIN))\
            .grid(row=9, column=0, columnspan=2, sticky="ew", padx=8, pady=(0, 8))

        self._banner(self.frame)

    def refresh(self):
        self.clear_errors()

    def submit(self):
        self.clear_errors()
        values = (self.name.get(), self.email.get(), self.password.get(), self.confirm.get())
        self.app.run_async(
            self.lifecycle,
            lambda: self.app.container.auth.register(*values),
            self._on_registered,
            lambda err: self.fail("Register failed", err, str(err) if getattr(err, "status", None) else "Error al registrar usuario"),
            operation="register",
        )

    def _on_registered(self, message: str):
        for e in (self.name, self.email, self.password, self.confirm):
            e.delete(0, tk.END)
        self.app.toast(message, kind="success")
        self.app.navigate(routing.LOGIN)
