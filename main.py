"""Entry point for the TagTodo desktop app."""

import logging
import sys
from PySide6.QtWidgets import QApplication

import style
from config import APP_NAME, ConfigError, load_settings
from storage import StorageError, load_theme, load_todo_list, open_storage
from window import MainWindow

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def main():
    try:
        settings = load_settings()
    except ConfigError as e:
        print(f"{APP_NAME}: {e}", file=sys.stderr)
        sys.exit(2)
    configure_logging(settings.log_level)

    try:
        store = open_storage(settings)
    except StorageError as e:
        logger.error(f"Cannot open {settings.storage_backend} storage: {e}")
        sys.exit(1)
    logger.info(f"Using {settings.storage_backend} storage in {settings.data_dir}")

    app = QApplication(sys.argv)
    app.setApplicationName(APP_NAME)
    app.setStyle("Fusion")

    dark = load_theme(store)
    if dark is None:
        dark = settings.dark_mode
    if dark is None:
        dark = style.system_prefers_dark(app)
    style.apply_theme(app, dark)

    window = MainWindow(load_todo_list(store), store, settings, dark)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
