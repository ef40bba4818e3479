"""Serve the stub over HTTP: python -m chaski

Useful for pointing a client that cannot take a TestClient at the stub.
Fixture misses come back as 500 responses naming the missing resource.
"""

import logging

import uvicorn

from chaski.app import create_app
from chaski.config import load_config

logger = logging.getLogger("chaski")


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(message)s")
    config = load_config()
    app = create_app(config)
    logger.info(
        "Serving %s stub on http://%s:%d", config.spec_path.name, config.host, config.port
    )
    uvicorn.run(app, host=config.host, port=config.port)


if __name__ == "__main__":
    main()
