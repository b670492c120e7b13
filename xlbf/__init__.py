import logging

from .bf_interpreter import BrainfuckInterpreter, ExecutionState, StepLimitExceeded
from .brackets import BracketMatcher, find_matching_bracket
from .errors import AccessKind, AccessViolation, BrainfuckError, BrainfuckSyntaxError
from .tape import CellType, TapeStore, cell_type_name
from .translator import CTranslator, TranslationResult, translate

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "AccessKind",
    "AccessViolation",
    "BracketMatcher",
    "BrainfuckError",
    "BrainfuckInterpreter",
    "BrainfuckSyntaxError",
    "CTranslator",
    "CellType",
    "ExecutionState",
    "StepLimitExceeded",
    "TapeStore",
    "TranslationResult",
    "cell_type_name",
    "find_matching_bracket",
    "translate",
]
