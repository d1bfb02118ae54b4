"""Process entry point: wire the collaborators together and run the UI."""

from rich.console import Console

from tuiman.core.database.history import HistoryLog
from tuiman.core.editor import ExternalEditor
from tuiman.core.http_client import HttpTransport
from tuiman.core.request_store import RequestStore
from tuiman.security.backends.encrypted_file import EncryptedFileBackend
from tuiman.security.backends.keyring import KeyringBackend
from tuiman.security.key_store import KeyStore
from tuiman.tui.app import SuspendingEditor, TuimanApp
from tuiman.tui.controllers import Services
from tuiman.tui.shell import AppShell
from tuiman.tui.state import PaneRatios
from tuiman.utils.config_manager import ConfigManager
from tuiman.utils.errors import ErrorHandler, TuimanError
from tuiman.utils.logging import get_logger, init_logging
from tuiman.utils.paths import AppPaths

logger = get_logger(__name__)

error_console = Console(stderr=True)


def build_services(paths: AppPaths, config) -> Services:
    """Open every collaborator the screens depend on.

    Raises:
        TuimanError: If the history log, transport or secret store cannot be set up.
    """
    keystore = KeyStore(
        [KeyringBackend(), EncryptedFileBackend(paths.secrets_dir)],
        service_name=config.secrets.service_name,
        preferred=config.secrets.backend,
    )
    keystore.initialise()

    return Services(
        store=RequestStore(paths.requests_dir),
        history=HistoryLog(paths.history_db_path),
        transport=HttpTransport(
            keystore,
            timeout=config.http.timeout,
            follow_redirects=config.http.follow_redirects,
            verify_tls=config.http.verify_tls,
        ),
        secrets=keystore,
        editor=SuspendingEditor(ExternalEditor(config.editor.command)),
        history_limit=config.history.list_limit,
    )


def main() -> int:
    try:
        paths = AppPaths().ensure()
        config = ConfigManager(paths.config_path).config
        log_manager = init_logging(
            paths.logs_dir,
            config.logging.level,
            config.logging.max_file_size,
            config.logging.backup_count,
        )
        services = build_services(paths, config)
    except TuimanError as e:
        ErrorHandler.handle(e, "Startup failed", log_traceback=False)
        error_console.print(f"Error: {e.message}", style="red", markup=False)
        return 1

    shell = AppShell(
        services,
        PaneRatios(split=config.ui.split_ratio, response=config.ui.response_ratio),
    )
    shell.startup()

    app = TuimanApp(shell)
    services.editor.attach(app)

    log_manager.set_console_enabled(False)
    try:
        app.run()
    finally:
        log_manager.set_console_enabled(True)
        services.transport.close()
        services.history.close()
        logger.info("tuiman exited")
        log_manager.shutdown()
    return 0
