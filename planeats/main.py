import logging

import uvicorn

from planeats.utilities.config import APP_HOST, APP_PORT, DEBUG, LOG_LEVEL


def main():
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )
    uvicorn.run("planeats.api.api_run:app", host=APP_HOST, port=APP_PORT, reload=DEBUG)


if __name__ == "__main__":
    main()
