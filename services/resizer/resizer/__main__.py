"""Run the gateway with uvicorn: ``python -m resizer``."""
import uvicorn

from resizer.config import Settings


def main() -> None:
    settings = Settings()
    uvicorn.run(
        "resizer.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
