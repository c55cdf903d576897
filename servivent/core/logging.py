import json
import logging
from datetime import datetime, timezone

from servivent.config.settings import Settings

# Campos que el middleware agrega con ``extra=`` a cada request registrado
REQUEST_FIELDS = ("method", "path", "status_code", "duration_ms", "client")


class JsonFormatter(logging.Formatter):
    """Una línea JSON por registro, con los datos del request cuando existen"""

    def __init__(self, service: str):
        super().__init__()
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "service": self.service,
            "logger": record.name,
            "message": record.getMessage(),
        }
        request = {field: getattr(record, field) for field in REQUEST_FIELDS if hasattr(record, field)}
        if request:
            payload["request"] = request
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logging(settings: Settings) -> None:
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    handler = logging.StreamHandler()
    if settings.log_json:
        handler.setFormatter(JsonFormatter(service=settings.app_name))
    else:
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s %(levelname)s %(name)s - %(message)s",
                datefmt="%Y-%m-%dT%H:%M:%S",
            )
        )

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)

    # uvicorn ya registra cada request; el middleware lo hace con más detalle
    logging.getLogger("uvicorn.access").setLevel(max(level, logging.WARNING))
