import argparse
import json
from pathlib import Path

from . import __version__
from .config import get_config, reload_config
from .env import load_env
from .errors import CatalystError
from .intents import IntentDispatcher
from .logger import get_logger
from .matching import analyze_skill_gaps, rank_jobs, score
from .metrics import board_summary, job_metrics
from .normalize import normalize_candidate
from .pipeline import PipelineEngine
from .schema import validate_candidate, validate_catalog, validate_job_strict
from .seed import JOBS, default_profile, seed_store
from .storage import open_store


def read_json(path: str):
    input_path = Path(path)
    if not input_path.exists():
        raise SystemExit(f"Input file not found: {input_path}")
    with input_path.open("r", encoding="utf-8") as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise SystemExit(f"Invalid JSON in {input_path}: {e}")


def load_candidate(args: argparse.Namespace):
    if getattr(args, "candidate", None):
        return normalize_candidate(read_json(args.candidate))
    return default_profile()


def open_engine(args: argparse.Namespace) -> PipelineEngine:
    config = get_config()
    try:
        store = open_store(Path(args.store), max_retries=config.db_retries)
        return PipelineEngine(store)
    except CatalystError as e:
        raise SystemExit(f"Cannot open pipeline: {e}")


def print_match(result) -> None:
    print(f"Score: {result.score}%")
    print("Factors:")
    for name, value in result.factors.to_dict().items():
        print(f"  {name}: {value:.2f}")
    if result.recommendations:
        print("Recommendations:")
        for rec in result.recommendations:
            print(f" - [{rec.priority}] {rec.message}")


def cmd_score(args: argparse.Namespace) -> None:
    candidate = load_candidate(args)
    job = read_json(args.job)
    result = score(candidate, job)
    if args.json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
        return
    print_match(result)


def cmd_rank(args: argparse.Namespace) -> None:
    candidate = load_candidate(args)
    if args.jobs:
        jobs = read_json(args.jobs)
        if not isinstance(jobs, list):
            raise SystemExit("Jobs file must contain a JSON list")
    else:
        try:
            jobs = open_store(Path(args.store)).list(JOBS)
        except CatalystError as e:
            raise SystemExit(f"Cannot read jobs: {e}")
    if not jobs:
        print("No jobs to rank.")
        return

    limit = args.limit if args.limit is not None else get_config().rank_limit
    ranked = rank_jobs(candidate, jobs, limit=limit, active_only=args.active_only)
    print(f"Top {len(ranked)} of {len(jobs)} jobs:\n")
    for job, result in ranked:
        print(f"{result.score:>3}%  {job.title or job.id}  [{job.status.value}]")


def cmd_gaps(args: argparse.Namespace) -> None:
    candidate = load_candidate(args)
    analysis = analyze_skill_gaps(candidate, read_json(args.job))
    if args.json:
        print(json.dumps(analysis.to_dict(), indent=2, ensure_ascii=False))
        return
    print(f"Strengths: {', '.join(analysis.strengths) or '-'}")
    print(f"Gaps: {', '.join(analysis.gaps) or '-'}")
    for gap in analysis.recommendations:
        print(f" - {gap.skill} ({gap.priority}, ~{gap.estimated_learning_time})")


def cmd_validate(args: argparse.Namespace) -> None:
    data = read_json(args.input)
    if args.kind == "candidate":
        errors = validate_candidate(data)
    elif args.kind == "job":
        _, errors = validate_job_strict(data)
    else:
        stages = data.get("stages") if isinstance(data, dict) else data
        errors = validate_catalog(stages if isinstance(stages, list) else [])
    if errors:
        print("Invalid:")
        for e in errors:
            print(f" - {e}")
        raise SystemExit(2)
    print("Valid")


def cmd_seed(args: argparse.Namespace) -> None:
    config = get_config()
    try:
        store = open_store(Path(args.store), max_retries=config.db_retries)
        counts = seed_store(store)
    except CatalystError as e:
        raise SystemExit(f"Seeding failed: {e}")
    print(f"Seeded {counts['candidates']} candidates and {counts['jobs']} jobs into {args.store}")


def cmd_stages(args: argparse.Namespace) -> None:
    engine = open_engine(args)
    for stage in engine.stages:
        flag = " (terminal)" if stage.terminal else ""
        print(f"{stage.order}. {stage.id}: {stage.name}{flag}")


def cmd_configure_stages(args: argparse.Namespace) -> None:
    data = read_json(args.input)
    stages = data.get("stages") if isinstance(data, dict) else data
    engine = open_engine(args)
    try:
        reassigned = engine.reconfigure_stages(stages if isinstance(stages, list) else [])
    except CatalystError as e:
        raise SystemExit(f"Invalid catalog: {e}")
    print(f"Catalog updated: {len(engine.stages)} stages")
    if reassigned:
        ids = ", ".join(str(i) for i in reassigned)
        print(f"Moved to {engine.initial_stage.name}: {ids}")


def cmd_board(args: argparse.Namespace) -> None:
    engine = open_engine(args)
    for stage, members in engine.board():
        print(f"{stage.name} ({len(members)})")
        for c in members:
            print(f"  [{c.id}] {c.name or '-'}  applied {c.applied_date or '-'}")


def run_intent(args: argparse.Namespace, intent: dict) -> None:
    engine = open_engine(args)
    dispatcher = IntentDispatcher(engine, author=get_config().note_author)
    notification = dispatcher.dispatch(intent)
    print(notification.message)
    if notification.level == "error":
        raise SystemExit(1)


def cmd_advance(args: argparse.Namespace) -> None:
    run_intent(args, {"type": "advance", "candidateId": args.id})


def cmd_move(args: argparse.Namespace) -> None:
    run_intent(args, {"type": "dropOnStage", "candidateId": args.id, "targetStageId": args.stage})


def cmd_reject(args: argparse.Namespace) -> None:
    run_intent(args, {"type": "reject", "candidateId": args.id})


def cmd_note(args: argparse.Namespace) -> None:
    intent = {"type": "addNote", "candidateId": args.id, "text": args.text}
    if args.author:
        intent["author"] = args.author
    run_intent(args, intent)


def cmd_stats(args: argparse.Namespace) -> None:
    engine = open_engine(args)
    candidates = engine.candidates()
    if args.job is not None:
        metrics = job_metrics(candidates, args.job, [s.id for s in engine.stages])
        print(f"Job {args.job}: {metrics['total_applications']} applications, {metrics['hired_count']} hired")
        print(f"Hire effectiveness: {metrics['hire_effectiveness']}%")
        avg = metrics["avg_days_to_close"]
        print(f"Avg days to close: {avg if avg is not None else 'N/A'}")
        for stage_id, count in metrics["stage_distribution"].items():
            print(f"  {stage_id}: {count}")
        return
    summary = board_summary(candidates)
    print(f"Total: {summary['total']}")
    print(f"Active: {summary['active']}")
    print(f"Hired: {summary['hired']}")
    print(f"Rejected: {summary['rejected']}")
    print(f"Conversion rate: {summary['conversion_rate']}%")


def add_store_arg(p: argparse.ArgumentParser, default: str) -> None:
    p.add_argument("--store", default=default, help=f"Path to record store, .json or .db (default: {default})")


def main(argv=None):
    # Load .env if present (CATALYST_STORE, CATALYST_LOG_LEVEL, etc.)
    load_env()
    try:
        config = reload_config()
    except ValueError as e:
        raise SystemExit(f"Invalid configuration: {e}")
    problems = config.validate()
    if problems:
        raise SystemExit("Invalid configuration: " + "; ".join(problems))
    store_default = str(config.store_path)

    parser = argparse.ArgumentParser(prog="catalysthr", description="Catalyst HR: candidate matching and hiring pipeline")
    parser.add_argument("--version", action="store_true", help="Show version")
    parser.add_argument("--verbose", action="store_true", help="Also log to the console")

    subparsers = parser.add_subparsers(dest="command")

    sc = subparsers.add_parser("score", help="Score a candidate against one job posting")
    sc.add_argument("--job", required=True, help="Path to job posting JSON")
    sc.add_argument("--candidate", help="Path to candidate JSON (default: demo profile)")
    sc.add_argument("--json", action="store_true", help="Print the full result as JSON")
    sc.set_defaults(func=cmd_score)

    rk = subparsers.add_parser("rank", help="Rank job postings for a candidate")
    rk.add_argument("--candidate", help="Path to candidate JSON (default: demo profile)")
    rk.add_argument("--jobs", help="Path to a JSON list of postings (default: jobs in the store)")
    rk.add_argument("--limit", type=int, help=f"Maximum results (default: {config.rank_limit})")
    rk.add_argument("--active-only", action="store_true", help="Skip postings that are not active")
    add_store_arg(rk, store_default)
    rk.set_defaults(func=cmd_rank)

    gp = subparsers.add_parser("gaps", help="Show skill strengths and gaps for a job posting")
    gp.add_argument("--job", required=True, help="Path to job posting JSON")
    gp.add_argument("--candidate", help="Path to candidate JSON (default: demo profile)")
    gp.add_argument("--json", action="store_true", help="Print the analysis as JSON")
    gp.set_defaults(func=cmd_gaps)

    val = subparsers.add_parser("validate", help="Validate a candidate, job or stage catalog JSON")
    val.add_argument("--input", required=True, help="Path to JSON input")
    val.add_argument("--kind", choices=["candidate", "job", "catalog"], default="candidate", help="Record kind (default: candidate)")
    val.set_defaults(func=cmd_validate)

    sd = subparsers.add_parser("seed", help="Load demo candidates and jobs into the store")
    add_store_arg(sd, store_default)
    sd.set_defaults(func=cmd_seed)

    st = subparsers.add_parser("stages", help="List the pipeline stage catalog")
    add_store_arg(st, store_default)
    st.set_defaults(func=cmd_stages)

    cfg = subparsers.add_parser("configure-stages", help="Replace the stage catalog from a JSON file")
    cfg.add_argument("--input", required=True, help="JSON list of stages, or {\"stages\": [...]}")
    add_store_arg(cfg, store_default)
    cfg.set_defaults(func=cmd_configure_stages)

    bd = subparsers.add_parser("board", help="Show candidates grouped by stage")
    add_store_arg(bd, store_default)
    bd.set_defaults(func=cmd_board)

    adv = subparsers.add_parser("advance", help="Move a candidate to the next stage")
    adv.add_argument("--id", required=True, help="Candidate id")
    add_store_arg(adv, store_default)
    adv.set_defaults(func=cmd_advance)

    mv = subparsers.add_parser("move", help="Move a candidate to any stage")
    mv.add_argument("--id", required=True, help="Candidate id")
    mv.add_argument("--stage", required=True, help="Target stage id")
    add_store_arg(mv, store_default)
    mv.set_defaults(func=cmd_move)

    rj = subparsers.add_parser("reject", help="Move a candidate to the rejected stage")
    rj.add_argument("--id", required=True, help="Candidate id")
    add_store_arg(rj, store_default)
    rj.set_defaults(func=cmd_reject)

    nt = subparsers.add_parser("note", help="Add a note to a candidate")
    nt.add_argument("--id", required=True, help="Candidate id")
    nt.add_argument("--text", required=True, help="Note text")
    nt.add_argument("--author", help=f"Note author (default: {config.note_author})")
    add_store_arg(nt, store_default)
    nt.set_defaults(func=cmd_note)

    sts = subparsers.add_parser("stats", help="Show board summary or per-job hiring metrics")
    sts.add_argument("--job", help="Job id for per-job metrics")
    add_store_arg(sts, store_default)
    sts.set_defaults(func=cmd_stats)

    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    get_logger(
        level=config.log_level,
        log_dir=config.log_dir,
        enable_file=config.log_to_file,
        enable_console=args.verbose,
    )

    if hasattr(args, "func"):
        args.func(args)
        return

    parser.print_help()


if __name__ == "__main__":
    main()
