"""Main entry point with CLI."""
import argparse
import asyncio
import logging
import sys
from datetime import date

from salet.config import Config
from salet.logging_conf import setup_logging

logger = logging.getLogger(__name__)


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Salet sales dashboard")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the proxy gateway")
    serve.add_argument("--host", default=None, help="Bind address (default: HOST)")
    serve.add_argument("--port", type=int, default=None, help="Port (default: PORT)")

    show = subparsers.add_parser("show", help="Load and print the dashboard")
    show.add_argument(
        "--metric",
        choices=["revenue", "orders", "customers"],
        default="revenue",
        help="Monthly metric to chart (default: revenue)",
    )

    add = subparsers.add_parser("add", help="Submit a new sale")
    add.add_argument("--amount", required=True, help="Sale amount")
    add.add_argument("--customer", required=True, help="Customer name")
    add.add_argument("--product", required=True, help="Product name")
    add.add_argument(
        "--date",
        default=date.today().isoformat(),
        help="Order date, YYYY-MM-DD (default: today)",
    )
    add.add_argument("--payment", required=True, help="Payment method")

    return parser.parse_args(argv)


def serve(config: Config, host: str | None, port: int | None) -> None:
    import uvicorn

    from salet.api.main import create_app

    try:
        config.validate()
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    logger.info("Environment variables loaded:")
    logger.info(f"   NOTION_TOKEN: {'Present' if config.notion_token else 'Missing'}")
    logger.info(f"   Raw Database ID: {config.raw_database_id}")
    logger.info(f"   Formatted Database ID: {config.database_id}")

    uvicorn.run(
        create_app(config),
        host=host or config.host,
        port=port or config.port,
        log_level=config.log_level.lower(),
    )


async def show(config: Config, metric: str) -> int:
    from salet.dashboard.client import GatewayClient
    from salet.dashboard.render import render_dashboard, render_monthly
    from salet.dashboard.state import DashboardState
    from salet.store.cache import SnapshotCache

    async with GatewayClient(config.gateway_url) as gateway:
        state = DashboardState(gateway, SnapshotCache(config.cache_file, config.cache_ttl_ms))
        await state.load()

    print(render_dashboard(state))
    if metric != "revenue" and not state.error:
        print()
        print(render_monthly(state, metric))
    return 1 if state.error else 0


async def add(config: Config, args: argparse.Namespace) -> int:
    from salet.dashboard.client import GatewayClient
    from salet.dashboard.render import render_dashboard
    from salet.dashboard.state import DashboardState, SaleFormError
    from salet.parse.models import SaleCreateRequest
    from salet.store.cache import SnapshotCache

    form = SaleCreateRequest(
        amount=args.amount,
        customer_name=args.customer,
        product_name=args.product,
        date=args.date,
        payment_method=args.payment,
    )
    async with GatewayClient(config.gateway_url) as gateway:
        state = DashboardState(gateway, SnapshotCache(config.cache_file, config.cache_ttl_ms))
        await state.load()
        try:
            await state.submit_sale(form)
        except SaleFormError as e:
            for field, message in e.errors.items():
                print(f"{field}: {message}", file=sys.stderr)
            return 2

    print("Sale added successfully!")
    print()
    print(render_dashboard(state))
    return 0


def main(argv=None) -> None:
    """Main entry point."""
    args = parse_args(argv)
    config = Config.from_env()
    setup_logging(config.log_level)

    if args.command == "serve":
        serve(config, args.host, args.port)
        return

    try:
        if args.command == "show":
            code = asyncio.run(show(config, args.metric))
        else:
            code = asyncio.run(add(config, args))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(1)
    sys.exit(code)


if __name__ == "__main__":
    main()
