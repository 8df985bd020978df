# wrkr/cli.py
"""
Command line entrypoint.

    wrkr [--json] evaluate [--repo R] [--org O]
    wrkr [--json] score [--top N] [--with-policy]
    wrkr [--json] profile [--name standard]
    wrkr [--json] fix [--top N] [--write-artifacts DIR]

Every command reads observations from ``--input`` (default: the configured
state path). Exit codes: 0 success, 1 runtime failure, 3 policy/profile
failure, 6 invalid input.
"""
import argparse
import logging
import sys
from datetime import datetime, timezone
from typing import Any, List, Optional

from wrkr import __version__
from wrkr.core.catalog import Catalogs
from wrkr.core.config import settings
from wrkr.core.constants import FindingType
from wrkr.core.errors import InvalidInputError, WrkrError
from wrkr.core.logging import setup_logging
from wrkr.pipeline import evaluate_policy, policy_records, run_pipeline
from wrkr.policy.evaluator import evaluate
from wrkr.policy.profiles import evaluate_profile
from wrkr.remediation.artifacts import build_artifacts, write_artifacts
from wrkr.risk.scoring import score_findings
from wrkr.schemas.base import dump_json
from wrkr.state import load_snapshot, resolve_state_path

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_POLICY_FAILURE = 3


class ArgumentParser(argparse.ArgumentParser):
    """Report usage errors as invalid input instead of exiting with status 2."""

    def error(self, message):
        raise InvalidInputError(message)


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def emit(payload: Any, args: argparse.Namespace, summary: str) -> None:
    if args.json:
        sys.stdout.write(dump_json(payload))
    else:
        print(summary)


def emit_error(error: WrkrError, json_output: bool) -> None:
    if json_output:
        sys.stderr.write(dump_json(error.to_dict()))
    else:
        print(f"wrkr: {error.code}: {error}", file=sys.stderr)


def load_catalogs(args: argparse.Namespace) -> Catalogs:
    return Catalogs.load(
        policy_path=args.policy or settings.POLICY_PATH,
        repo_root=args.repo_root or settings.REPO_ROOT,
    )


def load_findings(args: argparse.Namespace):
    return load_snapshot(resolve_state_path(args.input)).findings


def cmd_evaluate(args: argparse.Namespace) -> int:
    catalogs = load_catalogs(args)
    findings = load_findings(args)
    if args.repo or args.org:
        records = evaluate(args.repo, args.org, findings, catalogs.rules)
    else:
        records = policy_records(findings, catalogs)

    failed = sum(1 for r in records if r.finding_type == FindingType.POLICY_VIOLATION.value)
    checks = len(records) - failed
    emit(
        {"findings": [r.to_dict() for r in records]},
        args,
        f"evaluated {checks} policy checks: {checks - failed} passed, {failed} failed",
    )
    return EXIT_SUCCESS


def cmd_score(args: argparse.Namespace) -> int:
    findings = load_findings(args)
    if args.with_policy:
        findings = evaluate_policy(findings, load_catalogs(args))
    report = score_findings(findings, args.top, generated_at=utc_timestamp())

    top_score = report.ranked_findings[0].risk_score if report.ranked_findings else 0.0
    emit(
        report.to_dict(),
        args,
        f"ranked {len(report.ranked_findings)} findings across {len(report.repo_risk)} repos; top risk score {top_score:.2f}",
    )
    return EXIT_SUCCESS


def cmd_profile(args: argparse.Namespace) -> int:
    catalogs = load_catalogs(args)
    profile = catalogs.profile(args.name or settings.DEFAULT_PROFILE)
    result = evaluate_profile(profile, policy_records(load_findings(args), catalogs))

    emit(
        result.to_dict(),
        args,
        f"profile {result.profile}: {result.status} ({result.compliance_percent:.2f}% compliant, minimum {result.min_compliance:.2f}%)",
    )
    return EXIT_POLICY_FAILURE if result.status == "fail" else EXIT_SUCCESS


def cmd_fix(args: argparse.Namespace) -> int:
    catalogs = load_catalogs(args)
    result = run_pipeline(load_findings(args), catalogs, args.top, generated_at=utc_timestamp())
    plan = result.plan

    summary = (
        f"planned {len(plan.remediations)} remediations, skipped {len(plan.skipped)} "
        f"(fingerprint {plan.fingerprint[:12]})"
    )
    if args.write_artifacts:
        written = write_artifacts(build_artifacts(plan), args.write_artifacts)
        summary += f"; wrote {len(written)} artifacts under {args.write_artifacts}"
    emit(plan.to_dict(), args, summary)
    return EXIT_SUCCESS


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog="wrkr",
        description="Policy evaluation, risk scoring and remediation planning for AI-agent tooling findings.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--json", action="store_true", help="Emit machine-readable JSON.")

    common = ArgumentParser(add_help=False)
    common.add_argument("--input", help="Observation snapshot (default: configured state path).")
    common.add_argument("--policy", help="Policy override YAML (rules and profiles).")
    common.add_argument("--repo-root", help="Directory searched for wrkr-policy.yaml.")

    commands = parser.add_subparsers(dest="command", required=True)

    p_evaluate = commands.add_parser("evaluate", parents=[common], help="Emit policy check/violation records.")
    p_evaluate.add_argument("--repo", help="Evaluate all observations as this repository.")
    p_evaluate.add_argument("--org", help="Owning organization (default: local).")
    p_evaluate.set_defaults(handler=cmd_evaluate)

    p_score = commands.add_parser("score", parents=[common], help="Emit the ranked risk report.")
    p_score.add_argument("--top", type=int, default=settings.DEFAULT_TOP, help="Size of the top findings list.")
    p_score.add_argument("--with-policy", action="store_true", help="Add policy records before scoring.")
    p_score.set_defaults(handler=cmd_score)

    p_profile = commands.add_parser("profile", parents=[common], help="Evaluate a compliance profile.")
    p_profile.add_argument("--name", help="Profile name: baseline, standard or strict.")
    p_profile.set_defaults(handler=cmd_profile)

    p_fix = commands.add_parser("fix", parents=[common], help="Build the remediation plan.")
    p_fix.add_argument("--top", type=int, default=settings.DEFAULT_TOP, help="Maximum remediations (0 = all).")
    p_fix.add_argument("--write-artifacts", metavar="DIR", help="Write plan artifacts under DIR.")
    p_fix.set_defaults(handler=cmd_fix)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    setup_logging(settings.LOG_LEVEL)
    parser = build_parser()
    json_output = "--json" in argv

    try:
        args = parser.parse_args(argv)
        return args.handler(args)
    except WrkrError as e:
        logger.warning("Command failed", extra={"code": e.code})
        emit_error(e, json_output)
        return e.exit_code
    except Exception as e:
        logger.exception("Unexpected failure")
        error = WrkrError(str(e))
        emit_error(error, json_output)
        return error.exit_code


if __name__ == "__main__":
    sys.exit(main())
