"""HTML templates for placeholder pages and folder indexes."""

import html
from string import Template
from urllib.parse import quote

from .constants import ABOUT_URL, CONTACT_URL, HOME_URL

PAGE_TEMPLATE = Template("""\
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>$title</title>
</head>
<body>
  <nav><a href="$home_url">Home</a></nav>
  <h1>$title</h1>
  <p>Content for $title goes here.</p>
</body>
</html>
""")

INDEX_TEMPLATE = Template("""\
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>$heading</title>
</head>
<body>
  <nav>
    <a href="$home_url">Home</a>
    <a href="$about_url">About</a>
    <a href="$contact_url">Contact</a>
  </nav>
  <h1>$heading</h1>
  <ul>
$items
  </ul>
</body>
</html>
""")

ITEM_TEMPLATE = Template('    <li><a href="$href">$label</a></li>')


def _quote(value: str, escape: bool) -> str:
    return html.escape(value, quote=True) if escape else value


def _href(name: str, escape: bool) -> str:
    # percent-encode so "#", "?" and "%" stay part of the file name
    return html.escape(quote(name), quote=True) if escape else name


def render_page(name: str, *, escape: bool = True) -> str:
    """Return the placeholder document for a newly created page."""
    return PAGE_TEMPLATE.substitute(
        title=_quote(name, escape),
        home_url=HOME_URL,
    )


def render_index(
    folder_key: str,
    names: list[str],
    *,
    escape: bool = True,
) -> str:
    """Return the index document listing *names* sorted, one link each.

    Duplicates are dropped.  An empty *names* yields an empty list.
    """
    items = "\n".join(
        ITEM_TEMPLATE.substitute(
            href=_href(name, escape),
            label=_quote(name, escape),
        )
        for name in sorted(set(names))
    )
    return INDEX_TEMPLATE.substitute(
        heading=_quote(folder_key.upper(), escape),
        home_url=HOME_URL,
        about_url=ABOUT_URL,
        contact_url=CONTACT_URL,
        items=items,
    )
