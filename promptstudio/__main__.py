"""
Run the development server.

Usage:
    python -m promptstudio
"""
import uvicorn

from promptstudio.config import get_settings


def main():
    settings = get_settings()
    uvicorn.run(
        "promptstudio.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
