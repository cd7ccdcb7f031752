from __future__ import annotations

import logging
import threading
import tkinter as tk
from tkinter import ttk
from typing import Any, Callable, Optional

from salesdash.application import routing
from salesdash.application.lifecycle import LOAD, Ticket, ViewLifecycle
from salesdash.domain.errors import AuthenticationError, SelectionError, ValidationError
from salesdash.ui.views.auth_views import LoginView, RegisterView
from salesdash.ui.views.dashboard_view import DashboardView
from salesdash.ui.views.not_found_view import NotFoundView
from salesdash.ui.views.products_view import ProductsView
from salesdash.ui.views.profile_view import ProfileView
from salesdash.ui.views.reports_view import ReportsView
from salesdash.ui.views.sales_view import SalesView

log = logging.getLogger(__name__)


class App(tk.Tk):
    def __init__(self, container):
        super().__init__()
        self.title("Sales Dashboard")
        self.geometry("1280x760")
        self.minsize(1080, 640)

        self.container = container
        self.session = container.session

        self.status_var = tk.StringVar(value="")
        self.user_var = tk.StringVar(value="")
        self._toast_after_id = None
        self.current_route: Optional[str] = None

        self._build_styles()
        self._build_topbar()

        main = ttk.Frame(self)
        main.pack(fill="both", expand=True, padx=12, pady=(0, 8))

        self.sidebar = ttk.Frame(main)
        self.content = ttk.Frame(main)
        self.content.pack(side="right", fill="both", expand=True)

        self.nb = ttk.Notebook(self.content, style="Side.TNotebook")
        self.nb.pack(fill="both", expand=True)

        # Views (tabs hidden, navigation goes through self.navigate)
        self.views = {
            routing.LOGIN: LoginView(self.nb, self),
            routing.REGISTER: RegisterView(self.nb, self),
            routing.DASHBOARD: DashboardView(self.nb, self),
            routing.PRODUCTS: ProductsView(self.nb, self),
            routing.SALES: SalesView(self.nb, self),
            routing.REPORTS: ReportsView(self.nb, self),
            routing.PROFILE: ProfileView(self.nb, self),
            routing.NOT_FOUND: NotFoundView(self.nb, self),
        }

        self._build_sidebar()
        self._build_status_bar()

        self._unsubscribe = self.session.subscribe(lambda _s: self._sync_user_label())
        self.protocol("WM_DELETE_WINDOW", self._on_close)

        self.navigate(routing.DASHBOARD)
        self._load_session_user()

    def _load_session_user(self):
        # a restored session only has the token; fetch who it belongs to
        if not self.session.is_authenticated or self.session.user is not None:
            return
        self._shell = ViewLifecycle()
        self._shell.mount()
        self.run_async(
            self._shell,
            self.container.auth.get_profile,
            lambda _user: None,
            lambda err: self.handle_error("Profile load failed", err, "Error al cargar datos del perfil"),
        )

    def _build_styles(self):
        style = ttk.Style(self)
        style.layout("Side.TNotebook.Tab", [])
        style.configure("Side.TNotebook", tabmargins=0)

        style.configure("Big.TButton", padding=(14, 10))
        style.configure("Title.TLabel", font=("Segoe UI", 12, "bold"))
        style.configure("KPI.TLabel", font=("Segoe UI", 10))
        style.configure("KPIValue.TLabel", font=("Segoe UI", 14, "bold"))
        style.configure("Error.TLabel", foreground="#b91c1c")
        style.configure("Success.TLabel", foreground="#15803d")

    def _build_topbar(self):
        top = ttk.Frame(self)
        top.pack(fill="x", padx=12, pady=10)

        ttk.Label(top, text="Sales Dashboard", style="Title.TLabel").pack(side="left")
        self.logout_btn = ttk.Button(top, text="Cerrar sesión", command=self.logout)
        self.logout_btn.pack(side="right")
        ttk.Label(top, textvariable=self.user_var).pack(side="right", padx=10)
        ttk.Label(top, text=f"API: {self.container.settings.api_url}").pack(side="right", padx=10)

    def _build_sidebar(self):
        box = ttk.LabelFrame(self.sidebar, text="Menú")
        box.pack(fill="x", pady=(0, 10))

        entries = [
            ("📊 Dashboard", routing.DASHBOARD),
            ("📦 Productos", routing.PRODUCTS),
            ("🧾 Ventas", routing.SALES),
            ("📄 Informes", routing.REPORTS),
            ("👤 Perfil", routing.PROFILE),
        ]
        for i, (label, route) in enumerate(entries):
            ttk.Button(
                box, text=label, style="Big.TButton",
                command=lambda r=route: self.navigate(r),
            ).pack(fill="x", padx=10, pady=(10 if i == 0 else 6, 6))

    def _build_status_bar(self):
        bar = ttk.Frame(self)
        bar.pack(fill="x", padx=12, pady=(0, 10))
        ttk.Label(bar, textvariable=self.status_var).pack(side="left")

    def _sync_user_label(self):
        user = self.session.user
        self.user_var.set(f"{user.name} <{user.email}>" if user else "")

    def _sync_chrome(self, route: str):
        if route in routing.PROTECTED_ROUTES:
            if not self.sidebar.winfo_ismapped():
                self.sidebar.pack(side="left", fill="y", padx=(0, 10), before=self.content)
            self.logout_btn.state(["!disabled"])
        else:
            self.sidebar.pack_forget()
            self.logout_btn.state(["disabled"])

    def toast(self, msg: str, kind: str = "info", ms: int = 2500):
        prefix = {"info": "ℹ ", "success": "✅ ", "warn": "⚠ ", "error": "❌ "}.get(kind, "")
        self.status_var.set(prefix + msg)
        if self._toast_after_id is not None:
            self.after_cancel(self._toast_after_id)
        self._toast_after_id = self.after(ms, lambda: self.status_var.set(""))

    # ---------- Navigation ----------
    def navigate(self, route: str):
        target = routing.resolve_route(route, self.session)
        if target != route:
            log.info("route_redirect requested=%s shown=%s", route, target)

        if self.current_route is not None and self.current_route != target:
            self.views[self.current_route].on_hide()

        self.current_route = target
        self._sync_chrome(target)
        view = self.views[target]
        self.nb.select(view.frame)
        view.on_show()

    def logout(self):
        self.container.auth.logout()
        self.navigate(routing.LOGIN)
        self.toast("Sesión cerrada.", kind="info")

    # ---------- Background work ----------
    def run_async(
        self,
        lifecycle: ViewLifecycle,
        fn: Callable[[], Any],
        on_success: Callable[[Any], None],
        on_error: Callable[[Exception], None],
        operation: str = LOAD,
    ) -> Ticket:
        """Run ``fn`` on a worker thread and deliver the outcome on the Tk thread.

        Outcomes are dropped when the view was hidden meanwhile or a newer call
        of the same ``operation`` started.
        """
        ticket = lifecycle.begin(operation)

        def deliver(callback, value):
            if lifecycle.accepts(ticket):
                callback(value)
            else:
                log.debug("late_result_dropped ticket=%s", ticket)

        def worker():
            try:
                result = fn()
            except Exception as exc:
                self.after(0, lambda e=exc: deliver(on_error, e))
                return
            self.after(0, lambda r=result: deliver(on_success, r))

        threading.Thread(target=worker, daemon=True).start()
        return ticket

    def handle_error(self, title: str, err: Exception, message: str) -> str:
        """Turn a failure into the text shown to the user.

        Expired sessions end here: the token is dropped and the login view shown.
        """
        if isinstance(err, AuthenticationError):
            log.warning("%s: session rejected by backend (%s)", title, err)
            self.session.logout()
            self.navigate(routing.LOGIN)
            self.toast("Tu sesión expiró. Inicia sesión de nuevo.", kind="warn")
            return "Tu sesión expiró"
        if isinstance(err, (ValidationError, SelectionError)):
            self.toast(str(err), kind="warn")
            return str(err)
        log.error("%s: %s", title, err, exc_info=err)
        self.toast(message, kind="error")
        return message

    def _on_close(self):
        self._unsubscribe()
        for view in self.views.values():
            view.on_hide()
        self.container.api.close()
        self.destroy()
