"""
main.py — Entry point for the Bubble Menu demo.

    bubble-menu                      # five-item demo menu
    bubble-menu --items 9            # centre bubble + 8 on the ring
    bubble-menu --config menu.yaml --log-level DEBUG
"""

import argparse
import logging
import sys

from config import ConfigError, load_config, MenuConfig


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Draggable radial bubble menu")
    parser.add_argument("--config", type=str, default=None,
                        help="YAML file with engine settings")
    parser.add_argument("--items", type=int, default=None,
                        help="Number of generated bubbles (centre included)")
    parser.add_argument("--menu-distance", type=float, default=None,
                        help="Extra ring spacing on top of the minimum ring radius")
    parser.add_argument("--log-level", type=str, default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging verbosity")
    return parser


def generated_items(count: int) -> list[dict]:
    items = [{"id": "center", "text": "Menu", "radius": 60}]
    items += [{"id": f"item{i}", "text": f"Item {i}"} for i in range(1, max(1, count))]
    return items


def configure_logging(level: str):
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )


def main(argv=None):
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    log = logging.getLogger("main")

    try:
        config = load_config(args.config) if args.config else MenuConfig()
        if args.menu_distance is not None:
            config.layout.menu_distance = args.menu_distance
        config.validate()
    except (OSError, ConfigError) as exc:
        log.error(f"Cannot load configuration: {exc}")
        return 2

    items = generated_items(args.items) if args.items else None

    from PyQt6.QtWidgets import QApplication
    from version import __app_name__, __org_name__

    app = QApplication(sys.argv[:1])
    app.setApplicationName(__app_name__)
    app.setOrganizationName(__org_name__)

    from main_window import MainWindow
    window = MainWindow(items=items, config=config)
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
