#!/usr/bin/env python3
"""Compute seed mu/sigma for one player from per-mode MMR and game counts."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Annotated

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from skillseed.common import PlayerInputValidationError, PlayerSkillInput
from skillseed.config import (
    DEFAULT_CONFIG_DIR,
    SeedingSystemConfig,
    find_system_config,
    load_seeding_system_configs,
)
from skillseed.engine import RatingEngine, RatingResult

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Seed rating commands.",
)

ConfigDirOption = Annotated[
    Path,
    typer.Option("--config-dir", help="Directory of seeding system TOML files."),
]
SystemNameOption = Annotated[
    str,
    typer.Option("--system-name", help="Seeding system name from [system].name."),
]
JsonOption = Annotated[bool, typer.Option("--json", help="Print the full result as JSON.")]
VerboseOption = Annotated[bool, typer.Option("--verbose", help="Enable debug logging.")]


def _load_configs(config_dir: Path) -> list[SeedingSystemConfig]:
    try:
        return load_seeding_system_configs(config_dir)
    except (FileNotFoundError, NotADirectoryError, ValueError) as exc:
        raise typer.BadParameter(str(exc), param_hint="--config-dir") from exc


def _load_system(config_dir: Path, system_name: str) -> SeedingSystemConfig:
    configs = _load_configs(config_dir)
    try:
        return find_system_config(configs, system_name)
    except KeyError as exc:
        raise typer.BadParameter(str(exc.args[0]), param_hint="--system-name") from exc


def _echo_result(result: RatingResult, *, system_name: str, as_json: bool) -> None:
    if as_json:
        typer.echo(json.dumps({"system": system_name, **result.as_dict()}, indent=2))
        return

    skill = result.skill_result
    typer.echo(
        f"system={system_name} mu={result.mu:.2f} sigma={result.sigma:.3f} "
        f"normalized_skill={skill.normalized_skill:.2f} total_games={skill.total_games}"
    )
    for mode, item in skill.breakdown.items():
        normalized = "-" if item.normalized_skill is None else f"{item.normalized_skill:.3f}"
        typer.echo(
            f"  {mode:<7} effective_mmr={item.effective_mmr:8.2f} games={item.games:5d} "
            f"normalized_skill={normalized} weight={skill.weights.get(mode, 0.0):.2f}"
        )
    if result.uncertainty is not None:
        factors = result.uncertainty
        typer.echo(
            f"  factors experience={factors.experience:.3f} diversity={factors.diversity:.3f} "
            f"consistency={factors.consistency:.3f} recency={factors.recency:.3f} "
            f"peak={factors.peak_performance:.3f} data_quality={factors.data_quality:.3f} "
            f"combined={factors.combined:.4f}"
        )


def _run(player: PlayerSkillInput, *, config_dir: Path, system_name: str, as_json: bool) -> None:
    system = _load_system(config_dir, system_name)
    engine = RatingEngine(system.parameters)
    try:
        result = engine.compute_rating(player)
    except PlayerInputValidationError as exc:
        typer.echo(f"invalid player record: {exc}", err=True)
        _echo_result(exc.fallback, system_name=system.name, as_json=as_json)
        raise typer.Exit(code=1) from exc
    _echo_result(result, system_name=system.name, as_json=as_json)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def compute(
    ones_current_mmr: Annotated[int, typer.Option("--ones-current-mmr")] = 0,
    ones_current_games: Annotated[int, typer.Option("--ones-current-games")] = 0,
    ones_previous_mmr: Annotated[int, typer.Option("--ones-previous-mmr")] = 0,
    ones_previous_games: Annotated[int, typer.Option("--ones-previous-games")] = 0,
    twos_current_mmr: Annotated[int, typer.Option("--twos-current-mmr")] = 0,
    twos_current_games: Annotated[int, typer.Option("--twos-current-games")] = 0,
    twos_previous_mmr: Annotated[int, typer.Option("--twos-previous-mmr")] = 0,
    twos_previous_games: Annotated[int, typer.Option("--twos-previous-games")] = 0,
    threes_current_mmr: Annotated[int, typer.Option("--threes-current-mmr")] = 0,
    threes_current_games: Annotated[int, typer.Option("--threes-current-games")] = 0,
    threes_previous_mmr: Annotated[int, typer.Option("--threes-previous-mmr")] = 0,
    threes_previous_games: Annotated[int, typer.Option("--threes-previous-games")] = 0,
    config_dir: ConfigDirOption = DEFAULT_CONFIG_DIR,
    system_name: SystemNameOption = "default",
    as_json: JsonOption = False,
    verbose: VerboseOption = False,
) -> None:
    """Seed one player from the twelve tracker fields."""
    _configure_logging(verbose)
    player = PlayerSkillInput.from_tracker_fields(
        ones_current_peak=ones_current_mmr,
        ones_current_games=ones_current_games,
        ones_previous_peak=ones_previous_mmr,
        ones_previous_games=ones_previous_games,
        twos_current_peak=twos_current_mmr,
        twos_current_games=twos_current_games,
        twos_previous_peak=twos_previous_mmr,
        twos_previous_games=twos_previous_games,
        threes_current_peak=threes_current_mmr,
        threes_current_games=threes_current_games,
        threes_previous_peak=threes_previous_mmr,
        threes_previous_games=threes_previous_games,
    )
    _run(player, config_dir=config_dir, system_name=system_name, as_json=as_json)


@app.command()
def compute_file(
    path: Annotated[
        Path,
        typer.Argument(help="JSON file with {mode: {season: {mmr, games}}} for one player."),
    ],
    config_dir: ConfigDirOption = DEFAULT_CONFIG_DIR,
    system_name: SystemNameOption = "default",
    as_json: JsonOption = False,
    verbose: VerboseOption = False,
) -> None:
    """Seed one player from a JSON record."""
    _configure_logging(verbose)
    if not path.is_file():
        raise typer.BadParameter(f"File not found: {path}", param_hint="PATH")
    try:
        player = PlayerSkillInput.from_mapping(json.loads(path.read_text()))
    except (json.JSONDecodeError, PlayerInputValidationError) as exc:
        typer.echo(f"invalid player record: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    _run(player, config_dir=config_dir, system_name=system_name, as_json=as_json)


@app.command()
def list_systems(config_dir: ConfigDirOption = DEFAULT_CONFIG_DIR) -> None:
    """Print every seeding system found in the config directory."""
    for config in _load_configs(config_dir):
        typer.echo(f"{config.name} file={config.file_path.name} description={config.description}")
        for key, value in config.as_config_json().items():
            typer.echo(f"  {key}={value}")


if __name__ == "__main__":
    app()
