"""Some small utilities to improve writing docstrings.

This wraps ``filldoc`` from scipy._lib.doccer, to have only one place to import from.
While, the ``doccer`` submodule of scipy is not part of the public API, it seems to be stable enough to use it here.

Remember to escape literal percent signs as ``%%`` in all docstrings that are decorated.
"""

import inspect
from typing import Callable, Optional, TypeVar

from scipy._lib.doccer import filldoc

T = TypeVar("T")


def make_filldoc(docs: dict[str, str], doc_summary: Optional[str] = None) -> Callable[[T], T]:
    """Create a decorator that fills the ``%(name)s`` placeholders of a docstring.

    Parameters
    ----------
    docs
        A dictionary mapping placeholder names to the text that should be inserted.
        The text is dedented and then re-indented by scipy to the indentation level of the docstring it is inserted
        into.
    doc_summary
        A docstring for the created decorator itself.

    Returns
    -------
    filldoc
        The decorator.
        The dedented dictionary is available as ``filldoc._dict`` to build derived decorators.

    """
    cleaned_docs = {k: inspect.cleandoc(v) for k, v in docs.items()}
    scipy_filldoc = filldoc(cleaned_docs, unindent_params=False)

    def filldoc_decorator(obj: T) -> T:
        return scipy_filldoc(obj)

    filldoc_decorator._dict = cleaned_docs
    filldoc_decorator.__doc__ = doc_summary
    return filldoc_decorator


__all__ = ["make_filldoc"]
