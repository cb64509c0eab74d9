#!/usr/bin/env python3
"""
Periodization Engine CLI.

Volume landmark tracking and periodized program planning.

Usage:
    periodization-engine seed athlete-1 --level intermediate
    periodization-engine log athlete-1 chest 16
    periodization-engine summary athlete-1
    periodization-engine plan athlete-1 chest back --fatigued
    periodization-engine templates --level advanced
    periodization-engine instantiate intermediate-block-hypertrophy athlete-1 --name "Spring block"
"""

import argparse
import sys
from datetime import date
from typing import Optional

from .config import configure_logging, get_settings
from .db.repositories.sqlite_store import SQLiteRecordStore
from .exceptions import PeriodizationError
from .models.landmarks import VolumeStatus
from .models.planning import Readiness
from .services.landmarks import VolumeLandmarkStore
from .services.planner import SessionPlanner
from .services.templates import TemplateService


# ANSI color codes
class Colors:
    RED = "\033[91m"
    YELLOW = "\033[93m"
    GREEN = "\033[92m"
    BLUE = "\033[94m"
    CYAN = "\033[96m"
    BOLD = "\033[1m"
    RESET = "\033[0m"


def get_status_color(status: VolumeStatus) -> str:
    """Get color for a volume status."""
    colors = {
        VolumeStatus.BELOW_MEV: Colors.BLUE,
        VolumeStatus.OPTIMAL: Colors.GREEN,
        VolumeStatus.APPROACHING_MRV: Colors.YELLOW,
        VolumeStatus.EXCEEDING_MRV: Colors.RED,
    }
    return colors.get(status, Colors.RESET)


def cmd_seed(args, store: SQLiteRecordStore):
    """Seed default landmarks for a user."""
    landmarks = VolumeLandmarkStore(store)
    seeded = landmarks.seed_defaults(args.user_id, args.level)
    print(f"{Colors.GREEN}Seeded {len(seeded)} muscle groups for {args.user_id} ({args.level}){Colors.RESET}")


def cmd_log(args, store: SQLiteRecordStore):
    """Log current weekly sets for a muscle group."""
    landmarks = VolumeLandmarkStore(store)
    landmark = landmarks.upsert_current_volume(args.user_id, args.muscle_group, args.volume)
    print(
        f"Logged {landmark.current_volume:g} sets for {landmark.muscle_group.value} "
        f"(MEV {landmark.mev:g} / MAV {landmark.mav:g} / MRV {landmark.mrv:g})"
    )


def cmd_summary(args, store: SQLiteRecordStore):
    """Show volume status per muscle group."""
    landmarks = VolumeLandmarkStore(store)
    summaries = landmarks.volume_summary(args.user_id)

    print()
    print(f"{Colors.BOLD}Volume Summary - {args.user_id}{Colors.RESET}")
    print("=" * 72)

    if not summaries:
        print("No landmarks found. Run 'periodization-engine seed' first.")
        return

    print(f"{'Muscle group':<14} {'Sets':>6} {'Target':>7} {'MEV':>5} {'MAV':>5} {'MRV':>5}  Status")
    print("-" * 72)
    for s in summaries:
        color = get_status_color(s.status)
        print(
            f"{s.muscle_group.value:<14} {s.current_volume:>6g} {s.target_volume:>7g} "
            f"{s.mev:>5g} {s.mav:>5g} {s.mrv:>5g}  {color}{s.status.value}{Colors.RESET}"
        )

    if args.recommendations:
        print()
        print(f"{Colors.BOLD}Recommendations{Colors.RESET}")
        for rec in landmarks.generate_recommendations(args.user_id):
            print(
                f"  {rec.muscle_group.value:<14} {rec.adjustment_type.value:<9} "
                f"-> {rec.recommended_volume:g} sets  {rec.reasoning}"
            )
    print()


def cmd_plan(args, store: SQLiteRecordStore):
    """Plan the next session."""
    settings = get_settings()
    planner = SessionPlanner(
        landmarks=VolumeLandmarkStore(store),
        fatigued_intensity_pct=settings.fatigued_intensity_pct,
        ready_intensity_pct=settings.ready_intensity_pct,
    )

    if args.fatigued or args.ready:
        readiness = Readiness(ready_to_train=args.ready)
    else:
        readiness = Readiness.from_recovery_metrics(
            sleep_score=args.sleep,
            resting_hr=args.resting_hr,
            stress_level=args.stress,
            threshold=settings.readiness_threshold,
        )

    plan = planner.plan_next_session(args.user_id, args.muscle_groups, readiness)

    print()
    print(f"{Colors.BOLD}Next Session - {args.user_id}{Colors.RESET}")
    print("=" * 40)
    if readiness.recovery_score is not None:
        print(f"Recovery score:   {readiness.recovery_score:.1f}")
    state = f"{Colors.YELLOW}fatigued{Colors.RESET}" if plan.fatigued else f"{Colors.GREEN}ready{Colors.RESET}"
    print(f"Readiness:        {state}")
    print(f"Target intensity: {plan.target_intensity_pct:g}% 1RM")
    print(f"Volume:           x{plan.volume_multiplier:g}")
    print()
    for group in plan.muscle_groups:
        color = get_status_color(group.status)
        print(
            f"  {group.muscle_group.value:<14} {color}{group.status.value:<16}{Colors.RESET} "
            f"x{group.volume_multiplier:g}"
        )
    for tip in readiness.recommendations:
        print(f"  {Colors.CYAN}- {tip}{Colors.RESET}")
    print()


def cmd_templates(args, store: SQLiteRecordStore):
    """List catalog templates."""
    templates = TemplateService(store)
    templates.seed_builtin_templates()
    print()
    for t in templates.list_templates(args.level, args.goal):
        structure = t.structure
        print(f"{Colors.BOLD}{t.id}{Colors.RESET}  {t.name}")
        print(
            f"  {t.training_level.value}, {t.goal}, {t.periodization_type}, "
            f"{structure.get('frequency')}x/week, phases: {', '.join(structure.get('phases', []))}"
        )
    print()


def cmd_instantiate(args, store: SQLiteRecordStore):
    """Create a program from a template."""
    templates = TemplateService(store)
    templates.seed_builtin_templates()
    start = date.fromisoformat(args.start) if args.start else date.today()
    tree = templates.instantiate(args.template_id, args.user_id, args.name, start)

    print()
    print(f"{Colors.GREEN}Created program {tree.program.id}{Colors.RESET}: {tree.program.name}")
    for node in tree.mesocycles:
        meso = node.mesocycle
        print(f"  Mesocycle {meso.position}: {meso.phase} ({meso.length_in_weeks} weeks)")
        for micro_node in node.microcycles:
            micro = micro_node.microcycle
            deload = f" {Colors.YELLOW}deload{Colors.RESET}" if micro.is_deload else ""
            days = ", ".join(str(s.day_of_week) for s in micro_node.sessions)
            print(f"    Week {micro.week_number} [{micro.phase}]{deload} days: {days}")
    print()


def main(argv: Optional[list] = None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Periodization Engine - volume landmarks and periodized programs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  periodization-engine seed athlete-1 --level intermediate
  periodization-engine log athlete-1 chest 16
  periodization-engine summary athlete-1 --recommendations
  periodization-engine plan athlete-1 chest back --sleep 55 --resting-hr 72
  periodization-engine instantiate advanced-block-peaking athlete-1 --name "Meet prep"
        """,
    )
    parser.add_argument("--db", help="SQLite database path (defaults to settings)")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Seed command
    seed_p = subparsers.add_parser("seed", help="Seed default volume landmarks")
    seed_p.add_argument("user_id")
    seed_p.add_argument(
        "--level",
        choices=["beginner", "intermediate", "advanced"],
        default="intermediate",
        help="Training level for the defaults table",
    )

    # Log command
    log_p = subparsers.add_parser("log", help="Log current weekly sets for a muscle group")
    log_p.add_argument("user_id")
    log_p.add_argument("muscle_group")
    log_p.add_argument("volume", type=float, help="Weekly working sets")

    # Summary command
    summary_p = subparsers.add_parser("summary", help="Show volume status")
    summary_p.add_argument("user_id")
    summary_p.add_argument(
        "--recommendations", "-r", action="store_true", help="Include volume recommendations"
    )

    # Plan command
    plan_p = subparsers.add_parser("plan", help="Plan the next session")
    plan_p.add_argument("user_id")
    plan_p.add_argument("muscle_groups", nargs="+")
    readiness_group = plan_p.add_mutually_exclusive_group()
    readiness_group.add_argument("--fatigued", action="store_true", help="Not ready to train")
    readiness_group.add_argument("--ready", action="store_true", help="Ready to train")
    plan_p.add_argument("--sleep", type=float, help="Sleep score 0-100")
    plan_p.add_argument("--resting-hr", type=float, help="Resting heart rate (bpm)")
    plan_p.add_argument("--stress", type=float, help="Stress level 0-100")

    # Templates command
    templates_p = subparsers.add_parser("templates", help="List program templates")
    templates_p.add_argument("--level", choices=["beginner", "intermediate", "advanced"])
    templates_p.add_argument("--goal")

    # Instantiate command
    inst_p = subparsers.add_parser("instantiate", help="Create a program from a template")
    inst_p.add_argument("template_id")
    inst_p.add_argument("user_id")
    inst_p.add_argument("--name", required=True, help="Program name")
    inst_p.add_argument("--start", help="Start date (YYYY-MM-DD), defaults to today")

    args = parser.parse_args(argv)

    commands = {
        "seed": cmd_seed,
        "log": cmd_log,
        "summary": cmd_summary,
        "plan": cmd_plan,
        "templates": cmd_templates,
        "instantiate": cmd_instantiate,
    }
    if args.command not in commands:
        parser.print_help()
        return 1

    settings = get_settings()
    configure_logging("DEBUG" if settings.debug else "WARNING")
    store = SQLiteRecordStore(args.db or str(settings.database_path))

    try:
        commands[args.command](args, store)
    except PeriodizationError as e:
        print(f"{Colors.RED}Error: {e.message}{Colors.RESET}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
