import uvicorn

from authors_api.core.app_factory import create_app

app = create_app()


def run() -> None:
    """Serve the API with uvicorn (``authors-api`` console script)."""
    uvicorn.run("authors_api.main:app", host="0.0.0.0", port=8000, log_config=None)
