from __future__ import annotations

LOGIN = "login"
REGISTER = "register"
DASHBOARD = "dashboard"
PRODUCTS = "products"
SALES = "sales"
REPORTS = "reports"
PROFILE = "profile"
NOT_FOUND = "not_found"

PUBLIC_ROUTES = frozenset({LOGIN, REGISTER})
PROTECTED_ROUTES = frozenset({DASHBOARD, PRODUCTS, SALES, REPORTS, PROFILE})


def resolve_route(name: str | None, session) -> str:
    """Map a requested view to the one that may actually be shown.

    Only checks whether a token is held; token validity is left to the backend.
    """
    route = (name or "").strip().strip("/").lower()
    if not route:
        route = DASHBOARD
    if route in PUBLIC_ROUTES:
        return route
    if route not in PROTECTED_ROUTES:
        return NOT_FOUND
    if not session.is_authenticated:
        return LOGIN
    return route
