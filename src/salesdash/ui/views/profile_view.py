from __future__ import annotations

import tkinter as tk
from tkinter import ttk

from salesdash.domain.models import User
from salesdash.ui.views.base import BaseView

PROFILE_LOAD_ERROR = "Error al cargar datos del perfil"
PROFILE_SAVE_ERROR = "Error al actualizar perfil"


class ProfileView(BaseView):
    def __init__(self, notebook: ttk.Notebook, app):
        super().__init__(notebook, app, "Profile")
        self.user: User | None = None

        tab = self.frame
        ttk.Label(tab, text="Mi Perfil", style="Title.TLabel").pack(anchor="w", padx=10, pady=(10, 0))
        self.success_var = tk.StringVar(value="")
        ttk.Label(tab, textvariable=self.success_var, style="Success.TLabel").pack(anchor="w", padx=10)
        self._banner(tab)

        box = ttk.LabelFrame(tab, text="Datos personales")
        box.pack(fill="x", padx=10, pady=10)
        self.name = self._entry(box, "Nombre", 0, "name")
        self.email = self._entry(box, "Email", 1, "email")

        pw = ttk.LabelFrame(tab, text="Cambiar contraseña (opcional)")
        pw.pack(fill="x", padx=10, pady=10)
        self.current = self._entry(pw, "Contraseña actual", 0, "current_password", show="*")
        self.new = self._entry(pw, "Nueva contraseña", 1, "new_password", show="*")
        self.confirm = self._entry(pw, "Confirmar contraseña", 2, "confirm_password", show="*")

        self.save_btn = ttk.Button(tab, text="Guardar cambios", style="Big.TButton", command=self.submit)
        self.save_btn.pack(anchor="w", padx=10, pady=10)

    def reset_controls(self):
        self.save_btn.state(["!disabled"])

    def refresh(self):
        self.clear_errors()
        self.success_var.set("")
        self.app.run_async(
            self.lifecycle,
            self.app.container.users.get_profile,
            self._fill,
            lambda err: self.fail("Profile load failed", err, PROFILE_LOAD_ERROR),
        )

    def _fill(self, user: User):
        self.user = user
        for e in (self.name, self.email, self.current, self.new, self.confirm):
            e.delete(0, tk.END)
        self.name.insert(0, user.name)
        self.email.insert(0, user.email)

    def submit(self):
        if self.user is None:
            return
        self.clear_errors()
        self.success_var.set("")
        user_id = self.user.id
        values = {
            "name": self.name.get(),
            "email": self.email.get(),
            "current_password": self.current.get(),
            "new_password": self.new.get(),
            "confirm_password": self.confirm.get(),
        }
        self.save_btn.state(["disabled"])
        self.app.run_async(
            self.lifecycle,
            lambda: self.app.container.users.update_profile(user_id, values),
            self._on_saved,
            self._on_failed,
            operation="save",
        )

    def _on_saved(self, user: User):
        self.save_btn.state(["!disabled"])
        self._fill(user)
        self.success_var.set("Perfil actualizado correctamente")

    def _on_failed(self, err: Exception):
        self.save_btn.state(["!disabled"])
        status = getattr(err, "status", None)
        message = str(err) if status and status != 401 else PROFILE_SAVE_ERROR
        self.fail("Profile update failed", err, message)
