"""CLI front end for the analysis demo."""
import argparse
import asyncio
import json
import sys

from truthcheck.analysis.lifecycle import RequestState, RequestStateMachine, RequestStatus
from truthcheck.components.input_store import SAMPLE_TEXTS, InputStore
from truthcheck.components.verdict_presenter import PresentationAttributes, present_state
from truthcheck.core.analysis_client import AnalysisClient

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_REJECTED = 2


def render_presentation(attrs: PresentationAttributes) -> str:
    lines = [
        attrs.label,
        attrs.confidence_text,
        "[" + "#" * (attrs.confidence_bar_width // 5) + "." * (20 - attrs.confidence_bar_width // 5) + "]",
        "",
        "Analysis:",
        f"  {attrs.explanation}",
    ]
    if attrs.show_red_flags:
        lines.append("")
        lines.append("Red Flags Detected:")
        lines.extend(f"  - {flag}" for flag in attrs.red_flags)
    return "\n".join(lines)


def _print_state(state: RequestState) -> None:
    if state.status == RequestStatus.PENDING:
        print("Analyzing...", file=sys.stderr)


async def run_analysis(machine: RequestStateMachine) -> RequestState:
    unsubscribe = machine.subscribe(_print_state)
    try:
        await machine.submit()
    finally:
        unsubscribe()
    return machine.state


def cmd_samples(args):
    """List the bundled sample texts."""
    for index, text in enumerate(SAMPLE_TEXTS):
        print(f"[{index}] {text}")
    return EXIT_OK


def cmd_analyze(args):
    """Analyze one text through the request lifecycle."""
    store = InputStore()
    if args.sample is not None:
        try:
            store.use_sample(args.sample)
        except IndexError as e:
            print(str(e), file=sys.stderr)
            return EXIT_REJECTED
    else:
        store.set_text(args.text)

    client = AnalysisClient(base_url=args.url, timeout=args.timeout)
    machine = RequestStateMachine(client, store)

    if not machine.can_submit():
        print("Nothing to analyze: enter news text or pick a sample.", file=sys.stderr)
        return EXIT_REJECTED

    state = asyncio.run(run_analysis(machine))

    if args.json:
        print(json.dumps(state.to_dict(), ensure_ascii=False))
    elif state.status == RequestStatus.SUCCEEDED:
        print(render_presentation(present_state(state)))
    else:
        print(f"Analysis failed ({state.error_kind.value}): {state.message}", file=sys.stderr)

    return EXIT_OK if state.status == RequestStatus.SUCCEEDED else EXIT_FAILED


def build_parser():
    p = argparse.ArgumentParser(prog="truthcheck-demo", description="Check the credibility of news text")
    sub = p.add_subparsers(dest="cmd")
    s = sub.add_parser("samples", help="List sample texts")
    s.set_defaults(func=cmd_samples)
    s = sub.add_parser("analyze", help="Analyze news text")
    s.add_argument("text", nargs="?", default="", help="News headline or article excerpt")
    s.add_argument("--sample", "-s", type=int, help="Use sample text N instead of TEXT")
    s.add_argument("--url", help="Analysis service base URL (default from settings)")
    s.add_argument("--timeout", type=float, help="Transport timeout in seconds")
    s.add_argument("--json", action="store_true", help="Print the settled state as JSON")
    s.set_defaults(func=cmd_analyze)
    return p


def main(argv=None):
    p = build_parser()
    args = p.parse_args(argv)
    if not hasattr(args, "func"):
        p.print_help()
        return 2
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
