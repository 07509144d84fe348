"""
Request path helpers.

Endpoint paths carry ``{name}`` placeholders (e.g. ``"depth/{base}:{counter}"``)
that are filled from request parameters. Parameters not consumed by the path
are sent as the query string.
"""

import re
from typing import Any, Dict, Iterable, List, Mapping

_PLACEHOLDER = re.compile(r"\{([^}]+)\}")


def extract_params(path: str) -> List[str]:
    """
    Return placeholder names in the order they appear in the path.

    Example:
        >>> extract_params("tickers/{base}:{counter}")
        ['base', 'counter']
    """
    return _PLACEHOLDER.findall(path)


def implode_params(path: str, params: Mapping[str, Any]) -> str:
    """
    Substitute placeholders in path with values from params.

    Placeholders without a matching parameter are left untouched.

    Example:
        >>> implode_params("depth/{base}:{counter}", {"base": 1, "counter": 2})
        'depth/1:2'
    """

    def _replace(match: "re.Match[str]") -> str:
        key = match.group(1)
        if key in params:
            return str(params[key])
        return match.group(0)

    return _PLACEHOLDER.sub(_replace, path)


def omit(params: Mapping[str, Any], keys: Iterable[str]) -> Dict[str, Any]:
    """Return a copy of params without the given keys."""
    excluded = set(keys)
    return {key: value for key, value in params.items() if key not in excluded}
