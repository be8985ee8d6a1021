#!/usr/bin/env python3
"""
indentdedent - Indentation to indent/dedent marker transform

Rewrites an indentation-sensitive source file so that nesting is spelled
out with explicit marker characters instead of leading whitespace.

As an aside, this codebase leverages the ChRIS "plugin" concept/pattern as
general purpose python app development framework.

Usage:
    indentdedent inputdir/ outputdir/ --inputFile source.txt

    The transformed text is written to outputdir/ as <inputFile>.idd
    unless --outputFile names it.

Examples:
    # Default markers '>' and '<'
    indentdedent . out/ --inputFile model.uvl

    # Brace markers, '#' comments and multi-line parentheses left alone
    indentdedent . out/ --inputFile prog.py --indentChar '{' --dedentChar '}' \\
        --lineEscape '#' --pairedEscape '()'

    # Verbose output with per-marker trace
    indentdedent . out/ --inputFile prog.py -vvv
"""

import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from .config import appsettings, AppSettings
from .lib import IndentDedentStream, __version__, LOG, state_connectToLogger
from .models import ProgramState, pipeline


DISPLAY_TITLE = r"""
  _           _            _     _          _            _
 (_)_ __   __| | ___ _ __ | |_ _| | ___  __| | ___ _ __ | |_
 | | '_ \ / _` |/ _ \ '_ \| __/ _` |/ _ \/ _` |/ _ \ '_ \| __|
 | | | | | (_| |  __/ | | | || (_| |  __/ (_| |  __/ | | | |_
 |_|_| |_|\__,_|\___|_| |_|\__\__,_|\___|\__,_|\___|_| |_|\__|

  Indentation to indent/dedent marker transform
"""

# Define CLI arguments
parser = ArgumentParser(
    description="indentdedent - replace indentation with indent/dedent markers",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--inputFile", required=True, type=str, help="Input file (relative to inputdir)"
)

parser.add_argument(
    "--outputFile",
    default="",
    type=str,
    help="Output file (relative to outputdir). Defaults to <inputFile>.idd",
)

parser.add_argument(
    "--indentChar", default=None, type=str, help="Indent marker character (default from settings)"
)

parser.add_argument(
    "--dedentChar", default=None, type=str, help="Dedent marker character (default from settings)"
)

parser.add_argument(
    "--keepWhitespace",
    action="store_true",
    help="Keep the original indentation after the markers",
)

parser.add_argument(
    "--lineEscape",
    action="append",
    default=None,
    type=str,
    help="Character starting a line whose indentation is ignored (repeatable)",
)

parser.add_argument(
    "--pairedEscape",
    action="append",
    default=None,
    type=str,
    help="Two characters opening/closing a region without indentation analysis (repeatable)",
)

parser.add_argument(
    "--whitespace",
    default=None,
    type=str,
    help="Characters that make up indentation (default from settings)",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def settings_resolve(state: ProgramState) -> AppSettings:
    """
    Merge CLI overrides onto the environment settings.

    Args:
        state: Program state carrying the CLI options

    Returns:
        AppSettings with every given CLI option applied

    Raises:
        pydantic.ValidationError: An override is not a valid setting
    """
    overrides = {}
    if state.indentChar is not None:
        overrides["indent_char"] = state.indentChar
    if state.dedentChar is not None:
        overrides["dedent_char"] = state.dedentChar
    if state.whitespace is not None:
        overrides["whitespace_chars"] = state.whitespace
    if state.keepWhitespace:
        overrides["keep_whitespace"] = True
    if state.lineEscape:
        overrides["single_line_escapes"] = appsettings.single_line_escapes + "".join(state.lineEscape)
    if state.pairedEscape:
        pairs = ["".join(p) for p in appsettings.pairedEscapes_parse()] + list(state.pairedEscape)
        overrides["paired_escapes"] = ",".join(pairs)

    # keyword arguments take priority over the environment
    return AppSettings(**{**appsettings.model_dump(), **overrides})


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment and resolve all file paths.

    Verifies that the input file exists, then creates the output directory.

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added fields:
            - inputSourceFile: Resolved path to the input file
            - outputTargetFile: Resolved path to the output file
            - envOK: True if environment is valid

    Exits:
        1 if input file not found
    """

    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    input_file = state.inputdir / state.inputFile

    if not input_file.is_file():
        print(f"Error: Input file not found: {input_file}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.inputSourceFile = input_file
    LOG(f"Input file: {input_file}", level=2)

    output_name = state.outputFile or f"{Path(state.inputFile).name}.idd"
    state.outputTargetFile = state.outputdir / output_name
    state.outputTargetFile.parent.mkdir(parents=True, exist_ok=True)
    LOG(f"Output file: {state.outputTargetFile}", level=2)

    state.envOK = True
    return state


def source_transform(inputstate: ProgramState) -> ProgramState:
    """
    Stream the input file through the indent/dedent transform.

    Reads and writes one character at a time; the input is never loaded
    whole. Output goes to a ``.part`` file that replaces the target only
    once the whole input has been transformed, so a failed run leaves no
    output file behind.

    Args:
        inputstate: Program state with inputSourceFile and outputTargetFile set

    Returns:
        ProgramState with added field:
            - transformResult: Dict containing:
                - status: bool (transform success)
                - output_file: str (path to the written file)
                - units: int (characters written)
                - indents: int (indent markers written)
                - dedents: int (dedent markers written)

    Exits:
        1 if settings are invalid, reading fails or indentation is malformed
    """

    state = inputstate.copy()

    try:
        settings = settings_resolve(state)
    except ValueError as e:
        print(f"Invalid option: {e}", file=sys.stderr)
        sys.exit(1)

    LOG(f"Transforming {state.inputSourceFile.name}...", level=1)

    # written beside the target and moved into place only on success
    partial = state.outputTargetFile.with_name(state.outputTargetFile.name + ".part")
    units = 0
    try:
        with open(state.inputSourceFile, "r", encoding="utf-8") as source, \
                open(partial, "w", encoding="utf-8") as target:
            with IndentDedentStream.from_settings(
                source, settings, name=str(state.inputSourceFile)
            ) as stream:
                for unit in stream:
                    target.write(unit)
                    units += 1
                indents, dedents = stream.indents_emitted, stream.dedents_emitted
        partial.replace(state.outputTargetFile)
    except SyntaxError as e:
        partial.unlink(missing_ok=True)
        print(f"Indentation error: {e}", file=sys.stderr)
        sys.exit(1)
    except (OSError, UnicodeDecodeError) as e:
        partial.unlink(missing_ok=True)
        print(f"Error reading input file: {e}", file=sys.stderr)
        sys.exit(1)

    state.transformResult = {
        "status": True,
        "output_file": str(state.outputTargetFile),
        "units": units,
        "indents": indents,
        "dedents": dedents,
    }
    LOG(f"Wrote {units} characters", level=2)
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display transform results to user.

    Args:
        inputstate: Program state with transformResult populated

    Returns:
        ProgramState unchanged (terminal pipeline stage)

    Exits:
        1 if transformResult is None
    """
    state: ProgramState = inputstate.copy()
    if not state.transformResult:
        print("Error: Transform failed", file=sys.stderr)
        sys.exit(1)

    if state.verbosity >= 1:
        LOG("\n✓ Transform successful!", level=1)
        LOG(f"  Input:   {state.inputSourceFile}", level=1)
        LOG(f"  Output:  {state.transformResult['output_file']}", level=1)
        LOG(f"  Indents: {state.transformResult['indents']}", level=1)
        LOG(f"  Dedents: {state.transformResult['dedents']}", level=1)
    return state


@chris_plugin(
    parser=parser,
    title="indentdedent - Indentation to indent/dedent marker transform",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - transform an indented source file.

    Orchestrates the full pipeline:
        1. env_check: Validate paths and environment
        2. source_transform: Stream the input through IndentDedentStream
        3. results_report: Display results to user

    Args:
        options: CLI arguments from argparse
        inputdir: Directory containing the source file
        outputdir: Directory where the transformed file will be written

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """

    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    state_connectToLogger(state)

    pipeline(state, env_check, source_transform, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
