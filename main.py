"""
Command line runner for the screenshot-to-solution AI clients.

Commands:
1. extract  - read screenshots and print the extracted problem as JSON
2. solve    - extract the problem and generate three candidate solutions
3. update   - merge extra screenshots into a previously extracted problem

API keys are read from OPENAI_API_KEY / ANTHROPIC_API_KEY unless --api-key
is given.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from clients.base import AIClient
from clients.factory import AIClientFactory, ProviderType, get_api_key_for_provider
from modules.error_handler import ProcessingError
from modules.logger import enable_verbose_logging, setup_logger
from modules.types import DEFAULT_IMAGE_MIME_TYPE, AIClientConfig, ProcessingResult, Screenshot
from modules.user_prompts import (
    print_error,
    print_header,
    print_info,
    print_section,
    print_success,
)

logger = setup_logger(__name__)

DEFAULT_LANGUAGE = "python"


def _positive_int(value: str) -> int:
    """Argparse type validator for positive integers."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be an integer") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("must be > 0")
    return parsed


def _positive_float(value: str) -> float:
    """Argparse type validator for positive numbers."""
    try:
        parsed = float(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be a number") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("must be > 0")
    return parsed


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Turn screenshots of coding problems into problem statements and solutions",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument(
        "--provider",
        choices=[p.value for p in ProviderType],
        default=ProviderType.OPENAI.value,
        help="AI provider to use.",
    )
    parser.add_argument("--api-key", default=None, help="API key (defaults to the provider's environment variable).")
    parser.add_argument("--base-url", default=None, help="Override the provider's API endpoint.")
    parser.add_argument("--timeout", type=_positive_float, default=None, help="Request timeout in seconds.")
    parser.add_argument(
        "--max-retries", type=_positive_int, default=None,
        help="Retries performed by the client library (defaults to client.yaml).",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Show detailed logs.")

    subparsers = parser.add_subparsers(dest="command", required=True)

    extract = subparsers.add_parser("extract", help="Extract the problem from screenshots.")
    extract.add_argument("screenshots", nargs="+", type=Path, help="Screenshot image files.")
    extract.add_argument("--language", default=DEFAULT_LANGUAGE, help="Preferred solution language.")

    solve = subparsers.add_parser("solve", help="Extract the problem and generate solutions.")
    solve.add_argument("screenshots", nargs="+", type=Path, help="Screenshot image files.")
    solve.add_argument("--language", default=DEFAULT_LANGUAGE, help="Solution language.")

    update = subparsers.add_parser("update", help="Merge extra screenshots into an extracted problem.")
    update.add_argument("problem", type=Path, help="JSON file produced by 'extract'.")
    update.add_argument("screenshots", nargs="+", type=Path, help="Additional screenshot image files.")

    return parser


def _load_screenshots(paths: Sequence[Path]) -> List[Screenshot]:
    return [Screenshot.from_file(path) for path in paths]


def _load_png_screenshots(paths: Sequence[Path]) -> List[Screenshot]:
    """Load screenshots for extraction, which sends every image as PNG."""
    screenshots = _load_screenshots(paths)
    for shot in screenshots:
        if shot.mime_type != DEFAULT_IMAGE_MIME_TYPE:
            raise ValueError(
                f"{shot.path} is {shot.mime_type}; extract and solve accept PNG screenshots only"
            )
    return screenshots


def _load_problem(path: Path) -> ProcessingResult:
    with path.open("r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path} does not contain a JSON object")
    return ProcessingResult.from_dict(data)


def _print_result(result: ProcessingResult) -> None:
    print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))


async def run_command(args: argparse.Namespace, client: AIClient) -> int:
    """Execute the selected command against an initialized client."""
    if args.command == "update":
        existing = _load_problem(args.problem)
        screenshots = _load_screenshots(args.screenshots)
        result = await client.process_extra_screenshots(screenshots, existing)
        _print_result(result)
        return 0

    screenshots = _load_png_screenshots(args.screenshots)
    result = await client.extract_problem_info([shot.base64 for shot in screenshots], args.language)

    if args.command == "extract":
        _print_result(result)
        return 0

    print_section("Problem")
    _print_result(result)
    solutions = await client.generate_solutions(result, args.language)
    for index, solution in enumerate(solutions, start=1):
        print_section(f"Solution {index}")
        print(solution)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.verbose:
        enable_verbose_logging(logging.DEBUG)

    print_header("ScreenSolver", f"provider: {args.provider}")
    factory = AIClientFactory()
    try:
        # Reserved providers fail here, before any API key lookup
        client = factory.get_client(args.provider)
        config = AIClientConfig(
            api_key=get_api_key_for_provider(args.provider, args.api_key),
            base_url=args.base_url,
            timeout=args.timeout,
            max_retries=args.max_retries,
        )
        client.initialize(config)
        exit_code = asyncio.run(run_command(args, client))
    except (ProcessingError, ValueError, OSError) as e:
        logger.debug("Command failed", exc_info=True)
        print_error(str(e))
        return 1
    finally:
        factory.reset_all_clients()

    print_success("Done")
    print_info(f"Processed {len(args.screenshots)} screenshot(s)")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
