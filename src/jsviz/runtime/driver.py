"""
Interpreter Driver

Orchestrates one run: parse, create a fresh InterpreterState, push the global
frame, evaluate, and hand back the timeline. Failures never propagate out of
`run`: any error ends the run with a single "Error: ..." step.
"""

import logging
from pathlib import Path
from typing import List, Optional, Union

from ..frontend.parser import Parser
from ..shared.errors import JsVizError
from ..utils.config import DEFAULT_PARSER_CACHE_FILE, DEFAULT_SOURCE_FILE, GLOBAL_FRAME_NAME, MAX_LOOP_ITERATIONS
from ..utils.io_utils import read_source_file
from .evaluator import Evaluator
from .recorder import ExecutionStep, error_step
from .state import ConsoleMessage, InterpreterState

logger = logging.getLogger(__name__)

STACK_OVERFLOW_MESSAGE = "Maximum call stack size exceeded"


class ExecutionResult:
    """Timeline of one run plus what it printed and, for failed runs, the cause."""
    def __init__(
        self,
        steps: List[ExecutionStep],
        console: Optional[List[ConsoleMessage]] = None,
        error: Optional[BaseException] = None,
        source: str = "",
        source_file: str = DEFAULT_SOURCE_FILE,
    ):
        self.steps = steps
        self.console = console if console is not None else []
        self.error = error
        self.source = source
        self.source_file = source_file

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def final_step(self) -> Optional[ExecutionStep]:
        return self.steps[-1] if self.steps else None


class InterpreterDriver:
    """
    Parser + evaluator wiring.

    The driver only holds the parser (stateless between runs); every call to
    `run` builds its own state, so ids restart at `_0` and runs never leak
    into each other.
    """

    def __init__(
        self,
        parser: Optional[Parser] = None,
        cache_file: Optional[str] = DEFAULT_PARSER_CACHE_FILE,
        max_loop_iterations: int = MAX_LOOP_ITERATIONS,
    ):
        self.parser = parser if parser is not None else Parser(cache_file=cache_file)
        self.max_loop_iterations = max_loop_iterations

    def run(self, source: str, source_file: str = DEFAULT_SOURCE_FILE) -> ExecutionResult:
        state = InterpreterState()
        try:
            program = self.parser.parse(source, source_file)
            state.memory.push_frame(GLOBAL_FRAME_NAME, state.global_scope.scope_id)
            evaluator = Evaluator(state, max_loop_iterations=self.max_loop_iterations)
            evaluator.execute_program(program)
        except JsVizError as e:
            if e.location is None:
                e.location = state.location
            logger.info("Run of %s stopped: %s", source_file, e.message)
            return self._failed(state, e, e.message, e.location, source, source_file)
        except RecursionError as e:
            logger.info("Run of %s stopped: %s", source_file, STACK_OVERFLOW_MESSAGE)
            return self._failed(state, e, STACK_OVERFLOW_MESSAGE, state.location, source, source_file)
        except Exception as e:
            logger.error("Interpreter failure on %s: %s", source_file, e, exc_info=True)
            return self._failed(state, e, str(e), state.location, source, source_file)

        logger.debug("Run of %s recorded %d steps", source_file, len(state.steps))
        return ExecutionResult(state.steps, console=state.console, source=source, source_file=source_file)

    def run_file(self, path: Union[Path, str]) -> ExecutionResult:
        return self.run(read_source_file(path), str(path))

    @staticmethod
    def _failed(state, error, message, location, source, source_file) -> ExecutionResult:
        return ExecutionResult(
            [error_step(message, location)],
            console=state.console,
            error=error,
            source=source,
            source_file=source_file,
        )


_default_driver: Optional[InterpreterDriver] = None


def get_default_driver() -> InterpreterDriver:
    global _default_driver
    if _default_driver is None:
        _default_driver = InterpreterDriver()
    return _default_driver


def run_interpreter(source: str) -> List[ExecutionStep]:
    """Source text in, timeline out. Never raises for errors in the program."""
    return get_default_driver().run(source).steps
