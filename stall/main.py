"""Entry point for the stall-order Textual app."""

from __future__ import annotations

from stall.config import load_settings
from stall.logging_setup import configure_logging
from stall.stall_app import StallApp


def main() -> None:
    settings = load_settings()
    configure_logging(settings)
    StallApp(settings).run()


if __name__ == "__main__":
    main()
