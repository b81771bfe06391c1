"""Simple CLI entry point for inlet-spacing."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Sequence

from loguru import logger

from .advisory import AdvisoryRequest, InletTypeAdvisor
from .cascade import InletResult, results_dataframe
from .config import DEFAULT_CONFIG, load_project_from_json
from .models import DrainageProject
from .profile_engine import ProfileDerived
from .report import assemble_report


def main(argv: Sequence[str] | None = None) -> int:
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        description="Roadway profile and inlet spacing calculations."
    )
    parser.add_argument("--verbose", action="store_true", help="Log engine details to stderr.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    demo_parser: argparse.ArgumentParser = subparsers.add_parser(
        name="demo",
        help="Write the sample two-inlet design to a JSON configuration file.",
    )
    demo_parser.add_argument("--output", type=Path, default=Path("inlets.json"), help="Destination .json file.")
    demo_parser.add_argument("--overwrite", action="store_true", help="Replace output if it already exists.")

    evaluate_parser: argparse.ArgumentParser = subparsers.add_parser(
        name="evaluate",
        help="Evaluate the profile and inlet cascade of a JSON configuration and print the summary.",
    )
    evaluate_parser.add_argument("--config", type=Path, required=True, help="Path to the JSON configuration file.")
    evaluate_parser.add_argument("--csv", type=Path, help="Optional CSV destination for the per-inlet results.")
    evaluate_parser.add_argument("--profile-csv", type=Path, help="Optional CSV destination for the sampled profile.")
    evaluate_parser.add_argument(
        "--validate-only",
        action="store_true",
        help="Validate the configuration without computing anything.",
    )

    suggest_parser: argparse.ArgumentParser = subparsers.add_parser(
        name="suggest",
        help="Ask the advisory service which inlet type suits one inlet.",
    )
    suggest_parser.add_argument("--config", type=Path, required=True, help="Path to the JSON configuration file.")
    suggest_parser.add_argument("--inlet", required=True, help="Structure ID of the inlet.")

    args: argparse.Namespace = parser.parse_args(list(argv) if argv is not None else None)
    if args.verbose:
        logger.remove()
        logger.add(sys.stderr, level="DEBUG")
    if args.command == "demo":
        _run_demo(output=args.output, overwrite=args.overwrite)
        return 0
    if args.command == "evaluate":
        _run_evaluate(
            config_path=args.config,
            csv_path=args.csv,
            profile_csv_path=args.profile_csv,
            validate_only=args.validate_only,
        )
        return 0
    if args.command == "suggest":
        _run_suggest(config_path=args.config, str_id=args.inlet)
        return 0
    parser.error(message=f"Unhandled command {args.command}")
    return 1


def _run_demo(output: Path, overwrite: bool) -> None:
    if output.exists() and not overwrite:
        raise SystemExit(f"{output} already exists. Use --overwrite to replace it.")
    output.write_text(json.dumps(DEFAULT_CONFIG, indent=2), encoding="utf-8")
    print(f"Wrote demo configuration to {output}")


def _run_evaluate(
    config_path: Path,
    csv_path: Path | None,
    profile_csv_path: Path | None,
    validate_only: bool,
) -> None:
    project: DrainageProject = _load_valid_project(config_path)
    if validate_only:
        print(f"{config_path} is valid.")
        return

    derived: ProfileDerived = project.recompute_profile()
    results: list[InletResult] = project.evaluate_inlets()
    print(assemble_report(project, results, derived).to_text())
    if csv_path is not None:
        results_dataframe(results).to_csv(csv_path)
        print(f"Wrote inlet results to {csv_path}")
    if profile_csv_path is not None:
        derived.polyline.to_dataframe().to_csv(profile_csv_path, index=False)
        print(f"Wrote sampled profile to {profile_csv_path}")


def _run_suggest(config_path: Path, str_id: str) -> None:
    project: DrainageProject = _load_valid_project(config_path)
    results: list[InletResult] = project.evaluate_inlets()
    for inlet, result in zip(project.inlets, results):
        if inlet.str_id == str_id:
            with InletTypeAdvisor() as advisor:
                print(advisor.suggest_message(AdvisoryRequest.from_result(inlet, result)))
            return
    raise SystemExit(f"No inlet with structure ID '{str_id}' in {config_path}.")


def _load_valid_project(config_path: Path) -> DrainageProject:
    try:
        project: DrainageProject = _load_project(config_path)
        _validate_project(project)
    except ValueError as exc:
        raise SystemExit(f"Invalid configuration: {exc}") from exc
    return project


def _load_project(config_path: Path) -> DrainageProject:
    suffix: str = config_path.suffix.lower()
    if suffix == ".json":
        return load_project_from_json(config_path)
    raise ValueError(f"Unsupported configuration extension '{config_path.suffix}'. Use .json.")


def _validate_project(project: DrainageProject) -> None:
    errors: list[str] = project.validate()
    if errors:
        raise ValueError("Validation failed:\n" + "\n".join(errors))
