import logging
import sys
import traceback
from pathlib import Path

from cachetools import LRUCache
from loguru import logger

from user_registry.app.runtime.config.config_data import ConfigData
from user_registry.app.runtime.context import get_config


class DuplicateExceptionFilter:
    """Loguru filter that collapses bursts of identical exception logs.

    Two records are identical when they carry the same message and the same
    traceback frames. The first one passes, repeats are dropped, and every
    ``report_every``-th repeat passes again prefixed with the repeat count.
    Records without an exception always pass.
    """

    def __init__(self, report_every: int = 1000, cache_size: int = 8):
        self.report_every = report_every
        self._seen: LRUCache = LRUCache(maxsize=cache_size)

    @staticmethod
    def _key(record) -> tuple | None:
        exception = record["exception"]
        if exception is None or exception.type is None:
            return None
        frames = tuple(
            (frame.filename, frame.lineno, frame.name)
            for frame in traceback.extract_tb(exception.traceback)
        )
        return record["message"], exception.type.__name__, frames

    def __call__(self, record) -> bool:
        key = self._key(record)
        if key is None:
            return True

        repeats = self._seen.get(key)
        if repeats is None:
            self._seen[key] = 0
            return True

        repeats += 1
        self._seen[key] = repeats
        if repeats % self.report_every:
            return False

        # Sinks share the record; only the first one to see it adds the prefix
        if "repeats" not in record["extra"]:
            record["extra"]["repeats"] = repeats
            record["message"] = f"[repeated {repeats} times] {record['message']}"
        return True


def configure_logging(main_config: ConfigData | None = None):
    main_config = main_config or get_config()
    cfg = main_config.logging
    env = main_config.app.environment

    # 0) Reset Loguru and guarantee a default request_id
    logger.remove()
    logger.configure(extra={"request_id": "-"})

    # Ensure {extra[request_id]} always exists
    def _ensure_request_id(record):
        record["extra"].setdefault("request_id", "-")

    log = logger.patch(_ensure_request_id)

    # 1) Formats
    fmt_plain = (
        "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
        "<level>{level: <8}</level> | "
        "[<cyan>{extra[request_id]}</cyan>] | "
        "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
        "<level>{message}</level>"
    )
    fmt_json_placeholder = "{message}"
    is_json_file = cfg.format == "json"

    backtrace_on = env != "production"
    diagnose_on = env != "production"

    # Debugging wants to see every occurrence
    dedupe = cfg.deduplicate_exceptions and cfg.level.upper() != "DEBUG"

    # 2) Loguru sinks
    # Console: always colorized, human-readable
    log.add(
        sys.stderr,
        level=cfg.level,
        format=fmt_plain,
        filter=DuplicateExceptionFilter() if dedupe else None,
        colorize=True,
        serialize=False,
        backtrace=backtrace_on,
        diagnose=diagnose_on,
        enqueue=False,
    )

    # File: JSON or plain
    if cfg.file:
        path = Path(cfg.file)
        path.parent.mkdir(parents=True, exist_ok=True)
        log.add(
            str(path),
            level=cfg.level,
            format=fmt_json_placeholder if is_json_file else fmt_plain,
            filter=DuplicateExceptionFilter() if dedupe else None,
            serialize=is_json_file,
            rotation=f"{cfg.max_size_mb} MB",
            retention=cfg.backup_count,
            compression="zip",
            enqueue=True,
            backtrace=backtrace_on,
            diagnose=diagnose_on,
        )

    # 3) Intercept stdlib logging and forward into Loguru
    class InterceptHandler(logging.Handler):
        """Redirect standard 'logging' records to Loguru."""

        def emit(self, record: logging.LogRecord) -> None:
            # Request logging middleware replaces uvicorn's access log
            if record.name == "uvicorn.access":
                return

            # Tracebacks are already logged by the middleware
            if record.name == "uvicorn.error" and record.levelno >= logging.ERROR:
                return

            try:
                level = logger.level(record.levelname).name
            except ValueError:
                level = record.levelno

            logger.opt(
                depth=2,
                exception=record.exc_info,
            ).bind(logger_name=record.name).log(level, record.getMessage())

    # 4) Replace stdlib handlers with our interceptor
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    for name in list(logging.root.manager.loggerDict.keys()):
        stdlog = logging.getLogger(name)
        stdlog.handlers = []
        stdlog.propagate = True

    # 5) Tune noise
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if main_config.database.echo else logging.WARNING
    )
    logging.getLogger("sqlalchemy.pool").setLevel(logging.WARNING)

    logging.getLogger("uvicorn").setLevel(logging.INFO)
    logging.getLogger("uvicorn.error").setLevel(logging.INFO)
    logging.getLogger("uvicorn.access").setLevel(logging.CRITICAL)

    # 6) Startup message
    log.info(
        "Logging configured",
        app_level=cfg.level,
        app_format=cfg.format,
        app_file=cfg.file,
        deduplicate_exceptions=dedupe,
        environment=env,
    )
