import json
import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

ROOT = Path(__file__).resolve().parent
SRC = ROOT / "src"
if SRC.exists() and str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from decisionsherlock.config import load_settings
from decisionsherlock.errors import DecisionSherlockError
from decisionsherlock.llm import OpenAILLM
from decisionsherlock.pipeline import analyze_decision
from decisionsherlock.schemas import AnalysisResult, Attachment, DecisionSpec
from decisionsherlock.scoring import mean_score, weighted_score
from decisionsherlock.templates import get_template, templates

logger = logging.getLogger("decisionsherlock")


def _load_spec(path: str, attach: list[str]) -> DecisionSpec:
    spec = DecisionSpec.model_validate(json.loads(Path(path).read_text(encoding="utf-8")))

    options = {o.id: o for o in spec.options}
    for item in attach:
        opt_id, sep, file_path = item.partition("=")
        if not sep or opt_id not in options:
            raise ValueError(f"--attach expects OPTION_ID=PATH with a known option id, got {item!r}")
        att_id = f"{opt_id}_att{len(options[opt_id].attachments) + 1}"
        options[opt_id].attachments.append(Attachment.from_path(file_path, attachment_id=att_id))
    return spec


def _print_scoreboard(spec: DecisionSpec, result: AnalysisResult) -> None:
    names = {o.id: o.name for o in spec.options}
    print("\n=== Scores ===", file=sys.stderr)
    for a in result.analysis:
        mark = "*" if a.option_id == result.winner_id else " "
        print(
            f"{mark} {a.option_id:<12} {names.get(a.option_id, ''):<24} "
            f"mean={mean_score(a):5.1f}  weighted={weighted_score(a, spec.criteria):5.1f}",
            file=sys.stderr,
        )
    if result.verdict:
        print(f"\nVerdict: {result.verdict}", file=sys.stderr)


def _cmd_analyze(args) -> int:
    try:
        spec = _load_spec(args.spec, args.attach)
    except (OSError, ValueError, ValidationError) as e:
        print(f"Invalid decision file: {e}", file=sys.stderr)
        return 2

    try:
        settings = load_settings(model=args.model)
        llm = OpenAILLM(api_key=settings.api_key)
        result = analyze_decision(
            spec,
            llm=llm,
            model=settings.model,
            temperature=settings.temperature,
            progress=lambda stage, pct: logger.info("[%3d%%] %s", pct, stage),
        )
    except DecisionSherlockError as e:
        logger.debug("Analysis failed: %s\n%s", e, e.preview)
        print(f"Error: {e.user_message}", file=sys.stderr)
        return 1

    out = json.dumps(result.model_dump(by_alias=True, exclude_none=True), ensure_ascii=False, indent=2)
    if args.out:
        Path(args.out).write_text(out, encoding="utf-8")
    else:
        print(out)
    _print_scoreboard(spec, result)
    return 0


def _cmd_template(args) -> int:
    try:
        spec = get_template(args.name)
    except KeyError as e:
        print(e.args[0], file=sys.stderr)
        return 2
    print(json.dumps(spec.model_dump(by_alias=True, exclude_none=True), ensure_ascii=False, indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="decision-sherlock")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging (includes raw model output previews)")
    sub = parser.add_subparsers(dest="command", required=True)

    p_an = sub.add_parser("analyze", help="Analyze a decision JSON file")
    p_an.add_argument("spec", type=str, help="Path to a DecisionSpec JSON file")
    p_an.add_argument("--attach", action="append", default=[], metavar="OPTION_ID=PATH", help="Attach a file to an option")
    p_an.add_argument("--model", type=str, default=None)
    p_an.add_argument("--out", type=str, default=None, help="Write result JSON here instead of stdout")
    p_an.set_defaults(func=_cmd_analyze)

    p_tpl = sub.add_parser("template", help="Print a starter decision JSON")
    p_tpl.add_argument("name", choices=sorted(templates()))
    p_tpl.set_defaults(func=_cmd_template)
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
