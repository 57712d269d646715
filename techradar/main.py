from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import get_settings
from .routers import assistant, auth, customers, sellers
from .utils.logging import configure_logging
from .utils.validation import FormValidationError


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    app = FastAPI(title=settings.APP_NAME, redirect_slashes=False)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(FormValidationError)
    async def form_validation_error(request: Request, exc: FormValidationError):
        # Shown inline next to the form that was submitted
        return JSONResponse(status_code=422, content={"detail": exc.message})

    app.include_router(auth.router, prefix=settings.API_PREFIX)
    app.include_router(customers.router, prefix=settings.API_PREFIX)
    app.include_router(sellers.router, prefix=settings.API_PREFIX)
    app.include_router(assistant.router, prefix=settings.API_PREFIX)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()
