"""CLI entry point: run `jsviz file.js` or `python -m jsviz file.js`."""

import logging
import sys
from pathlib import Path


def main(argv=None) -> int:
    import argparse
    from .runtime.driver import InterpreterDriver
    from .runtime.serialization import format_step, timeline_to_json
    from .shared.errors import ErrorReporter, JsVizError
    from .utils.io_utils import read_source_file, write_text_file

    parser = argparse.ArgumentParser(prog="jsviz", description="Record the execution timeline of a JavaScript file.")
    parser.add_argument("file", type=Path, help="Path to .js source file")
    parser.add_argument("--json", action="store_true", help="Print the timeline as JSON instead of text")
    parser.add_argument("-o", "--output", type=Path, help="Write the output to a file instead of stdout")
    parser.add_argument("--max-loop-iterations", type=int, default=None,
                        help="Stop loops after this many iterations (default: 1000)")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Logging verbosity")
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level), format="%(levelname)s %(name)s: %(message)s")

    path = args.file.resolve()
    if not path.exists():
        sys.stderr.write(f"jsviz: error: file not found: {path}\n")
        return 1
    if not path.is_file():
        sys.stderr.write(f"jsviz: error: not a file: {path}\n")
        return 1

    try:
        source = read_source_file(path)
    except (OSError, UnicodeDecodeError) as e:
        sys.stderr.write(f"jsviz: error: could not read file: {e}\n")
        return 1

    if args.max_loop_iterations is not None:
        driver = InterpreterDriver(max_loop_iterations=args.max_loop_iterations)
    else:
        driver = InterpreterDriver()
    result = driver.run(source, str(path))

    if args.json:
        output = timeline_to_json(result.steps, indent=2)
    else:
        lines = [format_step(step) for step in result.steps]
        lines.extend(f"console.{msg.level}: {msg.text}" for msg in result.console)
        output = "\n".join(lines)

    if args.output is not None:
        write_text_file(args.output, output + "\n")
    else:
        sys.stdout.write(output + "\n")

    if not result.success:
        if isinstance(result.error, JsVizError):
            reporter = ErrorReporter({str(path): source})
            reporter.report_exception(result.error)
            sys.stderr.write(reporter.format_all_errors() + "\n")
        else:
            sys.stderr.write(f"jsviz: runtime error: {result.error}\n")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
