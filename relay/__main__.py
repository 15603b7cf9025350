"""Run the relay with uvicorn on the configured host and port."""

import uvicorn

from relay.config import get_settings


def main() -> None:
    """Start the server; exits with a validation error if configuration is missing."""
    settings = get_settings()
    uvicorn.run("relay.main:app", host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
