from typing import Any

from typing_extensions import Unpack

from footstride.data_transform.base import BaseTransformer
from footstride.utils.dtypes import DfLikeT


def chain_transformers(
    data: DfLikeT, transformers: list[tuple[str, BaseTransformer]], **kwargs: Unpack[dict[str, Any]]
) -> DfLikeT:
    """Chain multiple transformers together.

    Each transformer is cloned before it is applied, so the passed instances stay untouched.

    Parameters
    ----------
    data
        The data to be transformed.
    transformers
        A list of tuples, where the first element is the name of the transformer and the second element is the
        transformer instance itself.
    kwargs
        Further keyword arguments for the transform function (e.g. ``sampling_rate_hz``).

    Returns
    -------
    data
        The transformed data.

    """
    for name, transformer in transformers:
        try:
            data = transformer.clone().transform(data, **kwargs).transformed_data_
        except Exception as e:
            raise RuntimeError(
                f"Error while applying transformer '{name}' in the transformer chain. "
                "Scroll up to see the full traceback of this error."
            ) from e
    return data
