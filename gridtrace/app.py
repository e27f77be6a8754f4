# flake8: noqa: E402
import logging
import argparse
import gettext
from pathlib import Path

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

# --------------------------------------------------------
# Gettext MUST be initialized before importing app modules
# --------------------------------------------------------
base_dir = Path(__file__).parent.parent
locale_dir = base_dir / 'gridtrace' / 'locale'
logging.info(f"Loading locales from {locale_dir}")
gettext.install("gridtrace", locale_dir)

import gi
gi.require_version('Adw', '1')
gi.require_version('Gtk', '4.0')
from gi.repository import Adw
from gridtrace import config
from gridtrace.widgets.mainwindow import MainWindow


class App(Adw.Application):
    def __init__(self, args):
        super().__init__(application_id='io.github.gridtrace')
        self.set_accels_for_action("win.paste", ["<Ctrl>v"])
        self.args = args

    def do_activate(self):
        settings_mgr = config.initialize_managers(self.args.config)
        win = MainWindow(settings_mgr.settings, application=self)
        win.present()


def main():
    parser = argparse.ArgumentParser(
        description=_(
            "Overlay adjustable grids on a pasted image to chart it."
        )
    )
    parser.add_argument(
        "--config",
        metavar="FILENAME",
        type=Path,
        help=_("Path to a YAML config file (default: per-user config)."),
    )
    parser.add_argument(
        '--loglevel',
        default='INFO',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        help=_('Set the logging level (default: INFO)')
    )

    args = parser.parse_args()

    # Set logging level based on the command-line argument
    log_level = getattr(logging, args.loglevel.upper(), logging.INFO)
    logging.getLogger().setLevel(log_level)
    logger = logging.getLogger(__name__)
    logger.info(f"Application starting with log level {args.loglevel.upper()}")

    app = App(args)
    status = app.run(None)
    if config.settings_mgr is not None:
        config.settings_mgr.save()
    return status


if __name__ == "__main__":
    main()
