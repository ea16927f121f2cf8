"""
Ordered fallback chains for heuristic extraction.
"""

import logging
from typing import Any, Callable, List

logger = logging.getLogger(__name__)


def run_fallbacks(extraction_methods: List[Callable[[], Any]],
                  default_value: Any = None) -> Any:
    """
    Attempt multiple extraction methods with fallbacks.

    Each method is called in order; the first truthy result that differs
    from the default wins. A method that raises is logged and skipped.

    Args:
        extraction_methods (list): List of zero-argument callables to try in order
        default_value (Any): Value to return if all methods fail

    Returns:
        Extracted data or default value
    """
    for method in extraction_methods:
        name = getattr(method, '__name__', 'anonymous')
        try:
            result = method()
            if result and result != default_value:
                logger.debug(f"Extraction method succeeded: {name}")
                return result
        except Exception as e:
            logger.debug(
                f"Extraction method failed: {name}, Error: {str(e)}"
            )

    return default_value
