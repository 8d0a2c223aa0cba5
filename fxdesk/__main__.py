"""
Start the forex desk API with uvicorn.

    python -m fxdesk
    fxdesk            (console script)

HOST / PORT come from the environment (default 0.0.0.0:3001).
"""

import uvicorn

from fxdesk.deps import get_settings


def main():
    settings = get_settings()
    uvicorn.run(
        "fxdesk.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
