# -*- coding: utf-8 -*-
"""Power Layout entrypoint.

Kept minimal:
- runtime dependency check
- bootstrap (logging, settings)
- QApplication creation
- show main window
"""
import sys


def _report_missing_deps(message: str) -> None:
    try:
        from PyQt5.QtWidgets import QApplication, QMessageBox
    except ImportError:
        print(message, file=sys.stderr)
        return
    app = QApplication.instance() or QApplication([])
    QMessageBox.critical(None, "Power Layout - Missing dependencies", message)
    del app


def main() -> None:
    from app.deps import ensure_runtime_deps

    try:
        ensure_runtime_deps()
    except RuntimeError as exc:
        _report_missing_deps(str(exc))
        sys.exit(1)

    from PyQt5.QtWidgets import QApplication, QMessageBox

    from app.bootstrap import bootstrap
    from app.controller import create_main_window
    from infra.crash_handler import install_global_exception_handlers
    from infra.settings import repair_user_space

    settings = bootstrap()
    # Unexpected exceptions end up in the log
    install_global_exception_handlers()

    app = QApplication(sys.argv)

    # Installer shortcuts / maintenance commands
    args = [a for a in sys.argv[1:] if not a.startswith("-")]
    if "--repair" in sys.argv[1:]:
        repair_user_space()
        QMessageBox.information(None, "Power Layout - Repair", "User settings were reset to defaults.")
        return

    window = create_main_window(settings)
    if args:
        window.open_path(args[0])
    window.show()
    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
