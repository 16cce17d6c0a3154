#!/usr/bin/env python3
"""
CLI for Crease live cricket scoring
"""
import logging

import click
from rich.console import Console
from rich.table import Table
from rich.panel import Panel

from crease.config import settings
from crease.database import init_db, get_session
from crease.engine import MatchScorer, new_match
from crease.engine.errors import ScoringError
from crease.engine.events import (
    DeliveryEvent,
    Dismissal,
    ExtraEvent,
    LineupSelection,
    PenaltyRequest,
    RetirementRequest,
    RetirementType,
    Signal,
)
from crease.engine.scorecard import DismissalType, ExtraType, Innings, Match, TeamSheet, TossDecision
from crease.sync import DatabaseSync, list_matches, load_match

console = Console()

DEMO_TEAMS = (
    TeamSheet(team_id="harbour", name="Harbour XI", short_name="HAR",
              player_ids=("a1", "a2", "a3", "a4", "a5")),
    TeamSheet(team_id="ridge", name="Ridge CC", short_name="RDG",
              player_ids=("b1", "b2", "b3", "b4", "b5")),
)

# Two-over, five-a-side match: Harbour bat first and set 25, Ridge chase it down
DEMO_SCRIPT = [
    LineupSelection(striker_id="a1", non_striker_id="a2", bowler_id="b1"),
    DeliveryEvent(runs_off_bat=1),
    DeliveryEvent(runs_off_bat=4),
    DeliveryEvent(extra=ExtraEvent(kind=ExtraType.WIDE)),
    DeliveryEvent(),
    DeliveryEvent(wicket=Dismissal(kind=DismissalType.BOWLED, player_out_id="a2"), new_batsman_id="a3"),
    DeliveryEvent(runs_off_bat=6),
    DeliveryEvent(runs_off_bat=1, extra=ExtraEvent(kind=ExtraType.LEG_BYE)),
    LineupSelection(bowler_id="b2"),
    DeliveryEvent(runs_off_bat=2),
    DeliveryEvent(runs_off_bat=4, extra=ExtraEvent(kind=ExtraType.NO_BALL)),
    DeliveryEvent(runs_off_bat=1),
    DeliveryEvent(
        wicket=Dismissal(kind=DismissalType.CAUGHT, player_out_id="a1", fielder_id="b3"),
        new_batsman_id="a4",
    ),
    DeliveryEvent(),
    DeliveryEvent(runs_off_bat=2, extra=ExtraEvent(kind=ExtraType.BYE)),
    DeliveryEvent(runs_off_bat=1),
    LineupSelection(striker_id="b1", non_striker_id="b2", bowler_id="a1"),
    DeliveryEvent(runs_off_bat=4),
    DeliveryEvent(runs_off_bat=1),
    DeliveryEvent(extra=ExtraEvent(kind=ExtraType.WIDE, extra_runs=1)),
    DeliveryEvent(runs_off_bat=6),
    RetirementRequest(player_out_id="b2", kind=RetirementType.RETIRED_HURT, next_batsman_id="b3"),
    DeliveryEvent(),
    DeliveryEvent(runs_off_bat=4),
    DeliveryEvent(runs_off_bat=2),
    LineupSelection(bowler_id="a2"),
    PenaltyRequest(runs=5),
    DeliveryEvent(runs_off_bat=1),
]


@click.group()
@click.option("--verbose", is_flag=True, help="Show engine debug logging")
def cli(verbose: bool):
    """Crease - Live Cricket Scoring"""
    logging.basicConfig(level=logging.DEBUG if verbose else settings.LOG_LEVEL)


@cli.command()
def init():
    """Initialize the database"""
    console.print("[yellow]Initializing database...[/yellow]")
    init_db()
    console.print("[green]Database initialized successfully![/green]")


@cli.command()
@click.option("--save", is_flag=True, help="Store every snapshot in the database")
def demo(save: bool):
    """Score a short scripted match ball by ball"""
    sync = None
    if save:
        init_db()
        sync = DatabaseSync()

    team_a, team_b = DEMO_TEAMS
    match = new_match(team_a, team_b, overs=2, toss_winner_id=team_a.team_id, toss_decision=TossDecision.BAT)
    scorer = MatchScorer(match, sync=sync)
    scorer.publish()

    for event in DEMO_SCRIPT:
        try:
            transition = _apply(scorer, event)
        except ScoringError as e:
            console.print(f"[red]{e}[/red]")
            return

        innings = transition.match.innings
        if transition.ball is not None:
            console.print(
                f"  {transition.ball.display:>4}   {innings.score}/{innings.wickets} ({innings.overs})"
            )
        if transition.has(Signal.OVER_COMPLETE):
            console.print("[dim]  -- end of over, new bowler required --[/dim]")
        if transition.has(Signal.INNINGS_COMPLETE):
            console.print(Panel(f"[bold]Innings break[/bold] - target {transition.match.target}"))

    _print_match(scorer.match)
    if save:
        console.print(f"[green]Saved as match {scorer.match.id}[/green]")


def _apply(scorer: MatchScorer, event):
    if isinstance(event, LineupSelection):
        return scorer.select_lineup(event)
    if isinstance(event, RetirementRequest):
        return scorer.retire(event)
    if isinstance(event, PenaltyRequest):
        return scorer.award_penalty(event)
    return scorer.deliver(event)


@cli.command()
@click.argument("match_id")
def show(match_id: str):
    """Print the stored scorecard of a match"""
    session = get_session()
    match = load_match(session, match_id)
    session.close()

    if match is None:
        console.print(f"[red]No match {match_id} found.[/red]")
        return
    _print_match(match)


@cli.command("list-matches")
def list_stored():
    """List stored matches"""
    session = get_session()
    records = list_matches(session)

    if not records:
        console.print("[red]No matches found. Run 'demo --save' first.[/red]")
        session.close()
        return

    table = Table(title=f"Matches ({len(records)} total)")
    table.add_column("ID")
    table.add_column("Teams", style="cyan")
    table.add_column("Status", style="magenta")
    table.add_column("Result")

    for record in records:
        table.add_row(
            record.id,
            f"{record.team_a_name} v {record.team_b_name}",
            record.status.value,
            record.result_summary or "",
        )

    console.print(table)
    session.close()


def _print_match(match: Match):
    for number, innings in ((1, match.innings1), (2, match.innings2)):
        if innings is None:
            continue
        team = match.team(innings.batting_team_id)
        console.print(Panel(
            f"[bold]{team.name}[/bold] {innings.score}/{innings.wickets} ({innings.overs} overs)"
            f" - RR: {innings.run_rate:.2f}",
            title=f"Innings {number}",
        ))
        _print_scorecard(innings)

    if match.result:
        console.print(f"\n[bold green]{match.result}[/bold green]")


def _print_scorecard(innings: Innings):
    """Print innings scorecard"""
    # Batting
    bat_table = Table(title="Batting")
    bat_table.add_column("Batter", style="cyan")
    bat_table.add_column("Dismissal")
    bat_table.add_column("R", justify="right")
    bat_table.add_column("B", justify="right")
    bat_table.add_column("4s", justify="right")
    bat_table.add_column("6s", justify="right")
    bat_table.add_column("SR", justify="right")

    for bi in innings.batsmen:
        dismissal = bi.wicket.kind.value.replace("_", " ") if bi.wicket else bi.status.value
        bat_table.add_row(
            bi.player_id,
            dismissal,
            str(bi.runs),
            str(bi.balls),
            str(bi.fours),
            str(bi.sixes),
            f"{bi.strike_rate:.1f}",
        )

    console.print(bat_table)

    extras = innings.extras
    console.print(
        f"Extras: {extras.total} (wd {extras.wides}, nb {extras.no_balls}, b {extras.byes},"
        f" lb {extras.leg_byes}, pen {extras.penalties})"
    )
    if innings.fall_of_wickets:
        fow = ", ".join(
            f"{w.total_score}-{i} ({w.player_out_id}, {w.over}.{w.ball})"
            for i, w in enumerate(innings.fall_of_wickets, start=1)
        )
        console.print(f"Fall of wickets: {fow}")

    # Bowling
    bowl_table = Table(title="Bowling")
    bowl_table.add_column("Bowler", style="magenta")
    bowl_table.add_column("O", justify="right")
    bowl_table.add_column("M", justify="right")
    bowl_table.add_column("R", justify="right")
    bowl_table.add_column("W", justify="right")
    bowl_table.add_column("Econ", justify="right")

    for spell in innings.bowlers:
        bowl_table.add_row(
            spell.player_id,
            str(spell.overs),
            str(spell.maidens),
            str(spell.runs),
            str(spell.wickets),
            f"{spell.economy:.1f}",
        )

    console.print(bowl_table)


if __name__ == "__main__":
    cli()
