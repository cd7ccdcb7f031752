from __future__ import annotations

import logging

from salesdash.application.container import build_container
from salesdash.config import get_app_paths, load_api_settings
from salesdash.logging_config import setup_logging
from salesdash.ui.app import App


def main() -> None:
    paths = get_app_paths()
    settings = load_api_settings()
    setup_logging(
        paths.logs_dir,
        level=logging.DEBUG if settings.is_development else logging.INFO,
        console=settings.is_development,
    )
    logging.getLogger(__name__).info("starting api_url=%s env=%s", settings.api_url, settings.env)

    container = build_container(settings, paths)

    app = App(container)
    app.mainloop()


if __name__ == "__main__":
    main()
