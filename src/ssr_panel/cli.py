"""Command-line entry point for running a panel simulation from files."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import signal
import sys
from pathlib import Path
from typing import Any, List, Optional

import yaml

from .config import get_settings
from .engine import SSREngine
from .models import PanelSimulationOutcome, Persona, ProductContext, SurveyQuestion
from .panel import CancellationToken

logger = logging.getLogger(__name__)


def _load_document(path: Path) -> Any:
    # YAML is a superset of JSON, so one loader covers both formats.
    with path.open("r", encoding="utf-8") as fp:
        return yaml.safe_load(fp)


def _load_list(path: Path, key: str) -> List[Any]:
    raw = _load_document(path)
    if isinstance(raw, dict):
        raw = raw.get(key, [])
    if not isinstance(raw, list):
        raise ValueError(f"{path} must contain a list of {key}")
    return raw


def load_personas(path: Path) -> List[Persona]:
    return [Persona.model_validate(entry) for entry in _load_list(path, "personas")]


def load_questions(path: Path) -> List[SurveyQuestion]:
    return [SurveyQuestion.model_validate(entry) for entry in _load_list(path, "questions")]


def load_product_context(path: Optional[Path]) -> Optional[ProductContext]:
    if path is None:
        return None
    return ProductContext.model_validate(_load_document(path) or {})


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Simulate a survey panel with semantic similarity rating.",
    )
    parser.add_argument(
        "--personas", type=Path, required=True, help="YAML or JSON list of personas."
    )
    parser.add_argument(
        "--questions", type=Path, required=True, help="YAML or JSON list of questions."
    )
    parser.add_argument(
        "--product", type=Path, help="Optional YAML or JSON product context."
    )
    parser.add_argument(
        "--concurrency",
        type=int,
        default=None,
        help="Personas simulated concurrently per batch.",
    )
    parser.add_argument(
        "--seed", type=int, default=None, help="Seed for rating sampling."
    )
    parser.add_argument(
        "--output", type=Path, help="Write the outcome JSON here instead of stdout."
    )
    return parser


async def _run(args: argparse.Namespace) -> PanelSimulationOutcome:
    personas = load_personas(args.personas)
    questions = load_questions(args.questions)
    product_context = load_product_context(args.product)

    token = CancellationToken()
    loop = asyncio.get_running_loop()
    try:
        # Ctrl+C stops the panel at the next batch boundary.
        loop.add_signal_handler(signal.SIGINT, token.cancel)
    except NotImplementedError:
        logger.debug("Signal handlers unsupported; Ctrl+C aborts immediately")

    def report(current: int, total: int) -> None:
        logger.info("Completed %d/%d personas", current, total)

    async with SSREngine.from_settings(get_settings(), seed=args.seed) as engine:
        return await engine.simulate_panel(
            personas,
            questions,
            progress_callback=report,
            cancel_check=token,
            concurrency_limit=args.concurrency,
            product_context=product_context,
        )


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    settings = get_settings()
    logging.basicConfig(level=settings.log_level, stream=sys.stderr)

    outcome = asyncio.run(_run(args))
    payload = json.dumps(outcome.model_dump(), indent=2)
    if args.output:
        args.output.write_text(payload + "\n", encoding="utf-8")
    else:
        print(payload)
    if outcome.cancelled:
        logger.warning("Simulation cancelled with %d results", len(outcome.results))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
