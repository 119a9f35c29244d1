"""AxtarGet entry point — CLI args, system check, and the uvicorn server."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

import uvicorn
from rich.console import Console

from axtarget.config import get_config
from axtarget.utils.logger import setup_logging

console = Console()
logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    config = get_config()
    parser = argparse.ArgumentParser(
        prog="axtarget",
        description="AxtarGet AI — chat API with web search grounding",
    )
    parser.add_argument(
        "--host",
        default=config.host,
        help=f"Interface to bind (default: {config.host})",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=config.port,
        help=f"Port to listen on (default: {config.port})",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Check the API key and connectivity to the LLM and search providers",
    )
    return parser.parse_args(argv)


async def _run_check() -> bool:
    """Test configuration and provider connectivity.

    Returns:
        True if every check passed.
    """
    from axtarget.pipeline import ChatPipeline

    console.print("\n[bold]AxtarGet System Check[/]\n")

    all_ok = True
    config = get_config()
    try:
        config.validate_api_keys()
        console.print(f"  [green]✅[/] api_key: set (model {config.llm_model})")
    except ValueError as e:
        console.print(f"  [red]❌[/] api_key: {e}")
        all_ok = False

    pipeline = ChatPipeline.from_config(config)
    results = await pipeline.check_providers()
    for component, info in results.items():
        available = info["available"]
        status = info["status"]
        if available:
            console.print(f"  [green]✅[/] {component}: {status}")
        else:
            console.print(f"  [red]❌[/] {component}: {status}")
            all_ok = False

    console.print()
    if all_ok:
        console.print("[bold green]All checks passed.[/]")
    else:
        console.print("[bold yellow]Some checks failed — see above.[/]")
    return all_ok


def main(argv: list[str] | None = None) -> None:
    """Synchronous entry point."""
    args = _parse_args(argv)
    config = get_config()
    setup_logging(
        verbose=args.verbose,
        log_level=config.log_level,
        log_to_file=config.log_to_file,
        log_dir=Path(config.log_dir) if config.log_dir else None,
    )

    if args.check:
        ok = asyncio.run(_run_check())
        sys.exit(0 if ok else 1)

    if not config.openai_api_key:
        logger.warning("OPENAI_API_KEY is not set — every chat request will fail")

    from axtarget.server import create_app

    console.print(f"[bold green]AxtarGet AI[/] listening on http://{args.host}:{args.port}")
    try:
        uvicorn.run(
            create_app(),
            host=args.host,
            port=args.port,
            log_config=None,
            log_level="debug" if args.verbose else config.log_level.lower(),
        )
    except KeyboardInterrupt:
        console.print("\n[bold green]Sağ ol![/] (Goodbye!)")


if __name__ == "__main__":
    main()
