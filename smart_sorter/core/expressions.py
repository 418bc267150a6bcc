# smart_sorter/core/expressions.py

import ast
import logging
from typing import Any, Callable, List, Sequence

from simpleeval import EvalWithCompoundTypes

from .errors import InvalidArgumentError
from .image_metadata import ImageFile

logger = logging.getLogger(__name__)

# Functions a classifier expression may call, besides methods of the values it sees.
EXPRESSION_FUNCTIONS = {
    "str": str, "int": int, "float": float, "len": len, "round": round,
    "min": min, "max": max, "abs": abs, "bool": bool,
}


def compile_classifier(expression: str) -> Callable[[ImageFile], Any]:
    """
    Turns an expression typed by the user into a classifier callable.

    The expression sees the current image as 'image' and its metadata mapping
    as 'props', e.g. "'Landscape' if image['Width'] > image['Height'] else 'Portrait'"
    or "props.get('Year')". It is evaluated by simpleeval, so statements,
    imports and underscore attributes such as '__class__' are rejected.
    Syntax errors are reported here, before any file is touched.
    """
    source = expression.strip()
    if not source:
        raise InvalidArgumentError("A classifier expression cannot be empty.")
    try:
        ast.parse(source, mode="eval")
    except SyntaxError as e:
        raise InvalidArgumentError(f"Invalid classifier expression {source!r}: {e.msg}") from e

    def classifier(image: ImageFile) -> Any:
        evaluator = EvalWithCompoundTypes(
            functions=EXPRESSION_FUNCTIONS,
            names={"image": image, "props": image.properties},
        )
        return evaluator.eval(source)

    classifier.__name__ = f"classifier({source})"
    return classifier


def compile_classifiers(expressions: Sequence[str]) -> List[Callable[[ImageFile], Any]]:
    classifiers = [compile_classifier(expression) for expression in expressions]
    logger.debug(f"Compiled {len(classifiers)} classifier expression(s).")
    return classifiers
