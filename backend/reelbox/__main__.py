import uvicorn
from .core.config import settings


def main():
    uvicorn.run("reelbox.main:app", host=settings.host, port=settings.port, reload=settings.app_debug and settings.app_env == "development")


if __name__ == "__main__":
    main()
