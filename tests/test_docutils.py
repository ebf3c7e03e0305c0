import inspect

from footstride._docutils import make_filldoc

_docfiller = make_filldoc(
    {
        "paras": """
    value
        The value.
        It spans two lines.
    """,
    },
    doc_summary="Fill the test docs.",
)


def test_placeholders_are_filled_with_docstring_indentation():
    @_docfiller
    def func():
        """Do something.

        Parameters
        ----------
        %(paras)s

        """

    assert "value\n    The value.\n    It spans two lines." in inspect.cleandoc(func.__doc__)
    assert "%(" not in func.__doc__


def test_escaped_percent_sign():
    @_docfiller
    def func():
        """Keep 50 %% of the data.

        %(paras)s
        """

    assert "Keep 50 % of the data." in func.__doc__


def test_derived_filldoc():
    derived = make_filldoc({**_docfiller._dict, "other": "Other text"})

    @derived
    def func():
        """%(other)s.

        %(paras)s
        """

    assert func.__doc__.startswith("Other text.")
    assert "It spans two lines." in func.__doc__
    assert _docfiller.__doc__ == "Fill the test docs."
