import uvicorn

from mediavault.config import settings


def run_backend():
    uvicorn.run(
        "mediavault.main:app",
        host=settings.host,
        port=settings.port,
        reload=False
    )


if __name__ == "__main__":
    run_backend()
