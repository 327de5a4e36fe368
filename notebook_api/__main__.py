"""CLI entrypoint: `python -m notebook_api`."""

import uvicorn

from notebook_api.config import settings


def main() -> None:
    uvicorn.run(
        "notebook_api.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
