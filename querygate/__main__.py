import asyncio

from .audit import configure_logging
from .config import DbConfig
from .server import serve


def main() -> None:
    config = DbConfig.from_env()
    configure_logging(config.log_level)
    try:
        asyncio.run(serve(config))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
