import uvicorn

from app.platform.config import settings
from app.platform.logger import get_logger

logger = get_logger("main")


def main() -> None:
    logger.info(f"Server starting on port {settings.PORT}...")
    logger.info("Make sure Chrome/Chromium is installed on your system")
    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()
