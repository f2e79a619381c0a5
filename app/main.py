import uvicorn

from app.api.main import create_app
from app.config.settings import Settings
from app.logging.logger import Log


def main() -> None:
    """Entry point: load settings -> configure logging -> serve the API."""
    settings = Settings()
    Log.configure(settings.log_level)
    app = create_app(settings)
    Log.info(f"Creative extractor listening on port {settings.port}")
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
