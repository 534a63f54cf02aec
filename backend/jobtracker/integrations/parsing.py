"""Best-effort parsing of generated email text into subject and body.

The model is asked to reply as ``Subject: ...`` + blank line + body, but
nothing guarantees it. ``parse_generated_email`` never raises: when no
subject line is found it falls back to DEFAULT_SUBJECT and the raw text.
"""

from typing import NamedTuple

DEFAULT_SUBJECT = "Application for Position"
SUBJECT_PREFIX = "subject:"


class EmailParts(NamedTuple):
    subject: str
    body: str


def parse_generated_email(text: str) -> EmailParts:
    """Split on the first ``Subject:`` line. A subject line with no body after it keeps the raw text as body."""
    lines = text.split("\n")

    for index, line in enumerate(lines):
        stripped = line.strip()
        if not stripped.lower().startswith(SUBJECT_PREFIX):
            continue
        subject = stripped[len(SUBJECT_PREFIX):].strip()
        body = "\n".join(rest for rest in lines[index + 1:] if rest.strip()).strip()
        return EmailParts(subject=subject or DEFAULT_SUBJECT, body=body or text)

    return EmailParts(subject=DEFAULT_SUBJECT, body=text)
