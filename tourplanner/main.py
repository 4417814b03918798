"""Main entry point for the tour planner API.

Usage:
    Development: uvicorn tourplanner.main:app --reload --port 8000
    Production: uvicorn tourplanner.main:app --host 0.0.0.0 --port 8000 --workers 4
"""

from tourplanner.api import create_app

app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "tourplanner.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info",
    )
