"""Title → URL slug derivation.

Canonical video URLs embed the slug, so the output for a given title must
never change between loads or releases.
"""

import re
import unicodedata

_non_alnum_re = re.compile(r"[^a-z0-9]+")


def slugify(title: str) -> str:
    """Lower-case, ASCII-fold and hyphenate a display title.

    Returns an empty string when nothing alphanumeric survives; callers
    decide how to build a URL around an empty slug.

    Examples:
        >>> slugify("My Cool Video!")
        'my-cool-video'
        >>> slugify("Café  —  Ep. 2")
        'cafe-ep-2'
    """
    if not title:
        return ""
    text = unicodedata.normalize("NFKD", title)
    text = text.encode("ascii", "ignore").decode("ascii").lower()
    return _non_alnum_re.sub("-", text).strip("-")
