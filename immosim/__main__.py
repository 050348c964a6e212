"""
Run the API server: ``python -m immosim``.
"""

import uvicorn

from immosim.config import get_settings


def main():
    settings = get_settings()
    uvicorn.run(
        "immosim.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
