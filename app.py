import logging
import sys
from pathlib import Path

from PySide6.QtWidgets import QApplication

from core.settings import load_settings
from ui.main_window import MainWindow


def _asset_path(*parts: str) -> Path:
    # PyInstaller onefile extracts bundled files under sys._MEIPASS.
    if getattr(sys, "frozen", False):
        return Path(getattr(sys, "_MEIPASS")) / Path(*parts)
    return Path(__file__).resolve().parent / Path(*parts)


def main() -> int:
    settings = load_settings()
    logging.basicConfig(
        level=getattr(logging, settings.effective_log_level(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = QApplication(sys.argv)
    app.setApplicationName("ImageShop")
    app.setOrganizationName("ImageShop")

    w = MainWindow(settings=settings, logo_path=_asset_path("assets", "Logo.png"))
    if len(sys.argv) > 1:
        w.load_path(sys.argv[1])
    w.show()
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
