from __future__ import annotations

import uvicorn

from .config import configure_logging, settings


def main() -> None:
    configure_logging()
    uvicorn.run("ttrack.main:app", host=settings.host, port=settings.port, reload=False, log_config=None)


if __name__ == "__main__":
    main()
