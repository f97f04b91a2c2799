# storefront/main.py
import argparse

import uvicorn

from storefront.api import create_app
from storefront.data.database import engine, wait_for_db
from storefront.data.seed import init_schema
from storefront.utils.logging import get_logger
from storefront.utils.settings import PORT

logger = get_logger(__name__)

app = create_app()


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="storefront", description="Storefront API server")
    parser.add_argument("--initdb", action="store_true", help="create missing tables and exit")
    parser.add_argument("--seed", action="store_true", help="with --initdb: insert the demo catalog if empty")
    parser.add_argument(
        "--keep-running",
        action="store_true",
        help="with --initdb: start the server instead of exiting",
    )
    return parser.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)

    wait_for_db()
    if args.initdb:
        init_schema(engine, seed=args.seed)
        if not args.keep_running:
            logger.info("db_init_done")
            return
    else:
        init_schema(engine)

    logger.info("api_listening", port=PORT)
    uvicorn.run(app, host="0.0.0.0", port=PORT)


if __name__ == "__main__":
    main()
