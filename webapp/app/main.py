from fastapi import FastAPI

from .config import settings
from .routers import pages_vehicles


def create_app() -> FastAPI:
    app = FastAPI(
        title="Fleet WebApp",
        debug=settings.DEBUG,
    )

    # Подключение роутеров
    app.include_router(pages_vehicles.router)

    return app


app = create_app()
