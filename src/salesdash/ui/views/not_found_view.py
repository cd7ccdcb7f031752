from __future__ import annotations

from tkinter import ttk

from salesdash.application import routing
from salesdash.ui.views.base import BaseView


class NotFoundView(BaseView):
    def __init__(self, notebook: ttk.Notebook, app):
        super().__init__(notebook, app, "404")
        ttk.Label(self.frame, text="404", style="Title.TLabel").pack(pady=(80, 10))
        ttk.Label(self.frame, text="Página no encontrada").pack()
        ttk.Button(self.frame, text="Volver al inicio", command=lambda: self.app.navigate(routing.DASHBOARD))\
            .pack(pady=20)
