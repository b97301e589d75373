import uvicorn
from prometheus_fastapi_instrumentator import Instrumentator

from timetrack import create_app
from timetrack.core.config import settings
from timetrack.core.logging import configure_logging

configure_logging(settings.LOG_LEVEL)
app = create_app()
Instrumentator().instrument(app).expose(app)


def run() -> None:
    # log_config=None keeps the JSON logging set up above.
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None)


if __name__ == "__main__":
    run()
