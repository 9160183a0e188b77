"""
Command-line interface for prompt refinement.

Runs the full pipeline on one prompt and prints the refined prompt, the
system prompt and the quality score (or the whole result as JSON).

Usage:
    # Domain detected from the text
    prompt-refiner "make query fast"

    # Explicit domain and tone
    prompt-refiner "make query fast" --domain sql --tone technical

    # Template variables, full JSON output
    prompt-refiner "summarize {{doc}}" --var doc=report.md --json

    # Read the prompt from a file ("-" for stdin)
    prompt-refiner --file prompt.txt --domain devops
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Dict, List, Optional

from prompt_refiner.config import settings
from prompt_refiner.exceptions import InputError, PromptRefinerError
from prompt_refiner.logging_config import get_logger, setup_logging
from prompt_refiner.models.enums import PromptDomain, PromptTone, TemplateType
from prompt_refiner.models.process import ProcessOptions, ProcessResult
from prompt_refiner.orchestration.orchestrator import build_orchestrator
from prompt_refiner.validation.validator import format_validation_report


logger = get_logger(__name__)


# ============================================================================
# CLI FUNCTIONS
# ============================================================================

def parse_variables(pairs: Optional[List[str]]) -> Dict[str, str]:
    """
    Parse NAME=VALUE pairs.

    Raises:
        InputError: If a pair has no "=" or an empty name
    """
    variables = {}
    for pair in pairs or []:
        name, sep, value = pair.partition("=")
        if not sep or not name.strip():
            raise InputError(f"Invalid variable '{pair}' (expected NAME=VALUE)")
        variables[name.strip()] = value
    return variables


def read_prompt(prompt: Optional[str], file: Optional[str]) -> str:
    """Prompt text from the positional argument, a file, or stdin ("-")."""
    if file == "-":
        return sys.stdin.read()
    if file:
        return Path(file).read_text(encoding="utf-8")
    if prompt is None:
        raise InputError("No prompt given (pass it as an argument or use --file)")
    return prompt


def render_text(result: ProcessResult) -> str:
    """Human-readable rendering of a process result."""
    score = result.score
    lines = [
        "Refined prompt:",
        result.refined,
        "",
        "System prompt:",
        result.system,
        "",
        f"Domain: {result.metadata.domain.value}",
        (
            f"Score: {score.overall:.2f} (clarity {score.clarity:.2f}, specificity {score.specificity:.2f}, "
            f"structure {score.structure:.2f}, completeness {score.completeness:.2f})"
        ),
    ]
    if result.metadata.rules_applied:
        lines.append(f"Rules applied: {', '.join(result.metadata.rules_applied)}")
    if result.suggestions:
        lines.append("")
        lines.append("Suggestions:")
        lines.extend(f"  - {s}" for s in result.suggestions)
    lines.append("")
    lines.append(format_validation_report(result.validation))
    if result.template:
        lines.append("")
        lines.append(f"Template ({result.template.type.value}):")
        lines.append(result.template.prompt)
    return "\n".join(lines)


async def refine_prompt(
    raw: str,
    domain: Optional[str] = None,
    tone: Optional[str] = None,
    context: Optional[str] = None,
    variables: Optional[Dict[str, str]] = None,
    template_type: Optional[str] = None,
) -> ProcessResult:
    """
    Run the pipeline once without a store.

    Returns:
        ProcessResult
    """
    orchestrator = build_orchestrator(with_store=False, with_cache=False)
    try:
        return await orchestrator.process({
            "raw": raw,
            "domain": domain,
            "tone": tone,
            "context": context,
            "variables": variables or {},
            "options": ProcessOptions(
                generate_template=True if template_type else None,
                template_type=TemplateType(template_type) if template_type else None,
            ),
        })
    finally:
        await orchestrator.close()


# ============================================================================
# MAIN CLI
# ============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="prompt-refiner",
        description="Prompt Refiner CLI - refine a prompt with domain rules and score it",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s "make query fast" --domain sql
  %(prog)s "hazme un logo bonito" --domain branding --tone creative
  %(prog)s "summarize {{doc}}" --var doc=report.md --json
  %(prog)s --file prompt.txt --template step-by-step
        """
    )

    parser.add_argument("prompt", nargs="?", default=None, help="Prompt text")
    parser.add_argument("--file", "-f", type=str, default=None, help="Read the prompt from a file ('-' for stdin)")
    parser.add_argument(
        "--domain", "-d",
        choices=[d.value for d in PromptDomain],
        default=None,
        help="Target domain (default: detected from the prompt)",
    )
    parser.add_argument("--tone", "-t", choices=[t.value for t in PromptTone], default=None, help="Tone adjustment")
    parser.add_argument("--context", "-c", type=str, default=None, help="Additional context for the system prompt")
    parser.add_argument(
        "--var",
        action="append",
        metavar="NAME=VALUE",
        help="Template variable (repeatable)",
    )
    parser.add_argument(
        "--template",
        choices=[t.value for t in TemplateType],
        default=None,
        help="Force a template of this type",
    )
    parser.add_argument("--json", action="store_true", help="Print the full result as JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable pipeline logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    setup_logging("DEBUG" if args.verbose else "ERROR")

    try:
        raw = read_prompt(args.prompt, args.file)
        result = asyncio.run(refine_prompt(
            raw,
            domain=args.domain,
            tone=args.tone,
            context=args.context,
            variables=parse_variables(args.var),
            template_type=args.template,
        ))
    except (PromptRefinerError, OSError) as e:
        logger.error("cli_failed", error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(result.model_dump(mode="json"), ensure_ascii=False, indent=2))
    else:
        print(render_text(result))

    if args.verbose:
        print(f"\nProcessed in {result.metadata.processing_time_ms:.1f} ms (max input {settings.max_input_length})", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
