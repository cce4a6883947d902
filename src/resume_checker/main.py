# Copyright 2026 Justin Cook
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Main entry point for the Resume Checker CLI.
"""

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from resume_checker import config
from resume_checker.ingest import ExtractionError, extract_text_with_timeout, validate_upload
from resume_checker.models import ResumeUpload, ScoreReport, StudentProfile
from resume_checker.resume_parser import parse_resume
from resume_checker.scorer import score_resume
from resume_checker.workflow import ResumeCheckerSession, ScoreComparison

logger = logging.getLogger(__name__)

STATUS_STYLES = {
    'excellent': 'green',
    'good': 'cyan',
    'needs-improvement': 'yellow',
    'poor': 'red',
}


def setup_logging(verbosity: int, quiet: bool = False, console: Console = None):
    """
    Configures logging:
    - File: <log dir>/resume_checker.log (DEBUG)
    - Console: Default=WARNING, -q=ERROR, -v=INFO, -vv=DEBUG
    """
    log_dir = Path(config.get_log_dir())
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "resume_checker.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    file_handler = logging.FileHandler(log_file)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s'))
    root.addHandler(file_handler)

    if quiet:
        level = logging.ERROR
    elif verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    console_handler = RichHandler(console=console or Console(stderr=True), show_path=False)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter('%(message)s'))
    root.addHandler(console_handler)

    # pypdf is chatty about recoverable structure problems
    if verbosity < 2:
        logging.getLogger("pypdf").setLevel(logging.ERROR)


def read_upload(path: str) -> ResumeUpload:
    with open(path, 'rb') as f:
        return ResumeUpload(name=os.path.basename(path), data=f.read())


def load_profile(path: str) -> StudentProfile:
    with open(path, 'r', encoding='utf-8') as f:
        return StudentProfile.from_dict(json.load(f))


def render_report(console: Console, report: ScoreReport, title: str = "ATS Compatibility"):
    style = STATUS_STYLES.get(report.overall_status, 'white')
    console.print(f"[bold]{title}:[/bold] [{style}]{report.overall_score}/100 ({report.overall_status})[/{style}]")

    if report.breakdown:
        table = Table(show_header=True, header_style="bold")
        table.add_column("Dimension")
        table.add_column("Score", justify="right")
        table.add_column("Status")
        for name, dim in report.breakdown.items():
            dim_style = STATUS_STYLES.get(dim.status, 'white')
            table.add_row(name, f"{dim.score}/{dim.max}", f"[{dim_style}]{dim.status}[/{dim_style}]")
        console.print(table)

    for issue in report.issues:
        console.print(f"  [red]✗[/red] {issue}")
    for suggestion in report.suggestions:
        console.print(f"  [yellow]•[/yellow] {suggestion}")


def render_comparison(console: Console, comparison: ScoreComparison):
    table = Table(title="Before / After", show_header=True, header_style="bold")
    table.add_column("Dimension")
    table.add_column("Original", justify="right")
    table.add_column("Generated", justify="right")
    table.add_column("Change", justify="right")
    deltas = comparison.dimension_deltas()
    for name, after in comparison.after.breakdown.items():
        before = comparison.before.breakdown.get(name)
        delta = deltas[name]
        colour = 'green' if delta > 0 else 'red' if delta < 0 else 'white'
        table.add_row(name, str(before.score if before else 0), str(after.score), f"[{colour}]{delta:+d}[/{colour}]")
    table.add_row(
        "[bold]overall[/bold]",
        str(comparison.before.overall_score),
        str(comparison.after.overall_score),
        f"{comparison.improvement:+d}",
    )
    console.print(table)


def _extract(path: str) -> str:
    upload = read_upload(path)
    message = validate_upload(upload, config.get_max_upload_bytes())
    if message:
        raise ExtractionError(message)
    return extract_text_with_timeout(upload, config.get_extract_timeout())


def cmd_score(args, console: Console) -> int:
    text = _extract(args.file)
    report = score_resume(text, os.path.basename(args.file))
    if args.json:
        console.print_json(json.dumps(report.to_dict()))
    else:
        render_report(console, report)
    return 0


def cmd_parse(args, console: Console) -> int:
    text = _extract(args.file)
    console.print_json(json.dumps(parse_resume(text).to_dict()))
    return 0


def cmd_optimize(args, console: Console) -> int:
    session = ResumeCheckerSession()
    report = session.analyze(read_upload(args.file))
    if report is None:
        logger.error(session.error)
        return 1

    profile = load_profile(args.profile) if args.profile else None
    session.start_editing(profile)
    comparison = session.generate()
    if comparison is None:
        logger.error(session.error)
        return 1

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / session.generated.file_name
    session.generated.save(str(output_path))

    if args.json:
        console.print_json(json.dumps({
            'output': str(output_path),
            'before': comparison.before.to_dict(),
            'after': comparison.after.to_dict(),
            'resume': session.resume.to_dict(),
        }))
    else:
        render_report(console, comparison.before, title="Original resume")
        render_report(console, comparison.after, title="Generated resume")
        render_comparison(console, comparison)
        console.print(f"Saved optimized resume to [bold]{output_path}[/bold]")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="ATS resume checker and optimizer")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="Increase output verbosity (-v=INFO, -vv=DEBUG)")
    parser.add_argument("-q", "--quiet", action="store_true", help="Only report errors")
    parser.add_argument("--max-size-mb", type=float, help="Largest accepted upload in MiB (default: 10)")
    parser.add_argument("--timeout", type=float, help="Seconds allowed for text extraction (default: 30)")
    parser.add_argument("--log-dir", help="Directory for the debug log file")

    sub = parser.add_subparsers(dest="command", required=True)

    score = sub.add_parser("score", help="Extract a resume and print its ATS compatibility score")
    score.add_argument("file", help="Path to a .pdf, .docx or .doc resume")
    score.add_argument("--json", action="store_true", help="Print the score report as JSON")
    score.set_defaults(handler=cmd_score)

    parse = sub.add_parser("parse", help="Extract a resume and print its structured fields as JSON")
    parse.add_argument("file", help="Path to a .pdf, .docx or .doc resume")
    parse.set_defaults(handler=cmd_parse)

    optimize = sub.add_parser("optimize", help="Generate an ATS-friendly resume and compare scores")
    optimize.add_argument("file", help="Path to a .pdf, .docx or .doc resume")
    optimize.add_argument("--profile", help="JSON file with name/email/phoneNumber/skills to fill blanks")
    optimize.add_argument("--output-dir", default="user_content/generated_resumes",
                          help="Where to write the generated DOCX")
    optimize.add_argument("--json", action="store_true", help="Print the comparison as JSON")
    optimize.set_defaults(handler=cmd_optimize)
    return parser


def main(argv=None):
    try:
        sys.exit(_main_cli(argv))
    except KeyboardInterrupt:
        sys.stderr.write("\n\033[31m[-] Cancelled by user\033[0m\n")
        sys.exit(130)


def _main_cli(argv=None) -> int:
    """
    Parses arguments, applies configuration overrides and dispatches the sub-command.
    """
    args = build_parser().parse_args(argv)

    if args.max_size_mb:
        config.set_override('max_upload_mb', args.max_size_mb)
    if args.timeout:
        config.set_override('extract_timeout', args.timeout)
    if args.log_dir:
        config.set_override('log_dir', args.log_dir)

    setup_logging(args.verbose, quiet=args.quiet)
    console = Console()

    try:
        return args.handler(args, console)
    except ExtractionError as e:
        logger.error(f"Could not read resume: {e}")
        return 1
    except OSError as e:
        logger.error(f"File error: {e}")
        return 1
    except ValueError as e:
        logger.error(f"Invalid input: {e}")
        return 1


if __name__ == "__main__":
    main()
