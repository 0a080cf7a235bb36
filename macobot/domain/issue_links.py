"""Issue reference annotation — ``#1234`` tokens to links."""

import re
from typing import List, Optional

# '#' at start of text or after whitespace, digits not followed by a word char
ISSUE_RE = re.compile(r"(?:^|(?<=\s))#(\d+)(?!\w)", re.ASCII)

LINKS_HEADER = "Post links:\n"


def find_issue_ids(text: str) -> List[str]:
    """Issue numbers in order of appearance."""
    return ISSUE_RE.findall(text or "")


def format_issue_link(template: str, issue_id: str) -> str:
    return template.replace("%s", issue_id)


def format_issue_links(text: str, template: str) -> Optional[str]:
    """Build the combined links reply for ``text``.

    Returns None when the template is empty or nothing matched. Links are
    concatenated as-is, so the template carries its own separators.
    """
    if not template:
        return None
    ids = find_issue_ids(text)
    if not ids:
        return None
    return LINKS_HEADER + "".join(format_issue_link(template, i) for i in ids)
