"""
Reply formatting for the chat window.

Pure string transforms, no I/O. The LLM tends to answer specialist searches
as one run-on numbered list ("1. **Name** Address: ... Phone: ... 2. **Name** ...");
these helpers break such answers into one readable block per record.
"""

import re
from typing import List, Tuple

FIELD_LABELS = (
    "Address",
    "Phone",
    "Telephone",
    "Email",
    "E-mail",
    "Website",
    "Web",
    "URL",
    "Distance",
    "Specialty",
    "Adresa",
    "Telefón",
    "Telefon",
    "Vzdialenosť",
    "Špecializácia",
    "Odbornosť",
)

# "1. **Name**" at the start of the text or after whitespace
_RECORD_START = re.compile(r"(?:(?<=\s)|^)(\d{1,3})\.\s+(?=\*\*)")

_RECORD_HEADER = re.compile(r"^(\d{1,3})\.\s+\*\*(.+?)\*\*\s*[-–:,]?\s*(.*)$", re.DOTALL)

_FIELD_LABEL = re.compile(
    r"(?:^|[\s,;]+)-?\s*\*{0,2}("
    + "|".join(re.escape(label) for label in sorted(FIELD_LABELS, key=len, reverse=True))
    + r")\*{0,2}\s*:\s*\*{0,2}\s*",
    re.IGNORECASE,
)

_MARKDOWN = re.compile(
    r"\*\*[^*\n]+\*\*"  # bold
    r"|__[^_\n]+__"
    r"|(?<![\w*])\*[^*\s][^*\n]*\*(?!\*)"  # italic
    r"|^#{1,6}\s"  # heading
    r"|^\s*[-*+]\s+\S"  # bullet
    r"|^\s*\d{1,3}\.\s+\S"  # ordered list
    r"|`[^`\n]+`"  # inline code
    r"|\[[^\]\n]+\]\([^)\s]+\)",  # link
    re.MULTILINE,
)


def has_markdown(text: str) -> bool:
    """True when the text carries markdown formatting markers."""
    return bool(text) and _MARKDOWN.search(text) is not None


def _split_fields(body: str) -> Tuple[str, List[Tuple[str, str]]]:
    matches = list(_FIELD_LABEL.finditer(body))
    if not matches:
        return body.strip(), []

    description = body[: matches[0].start()].strip()
    fields = []
    for i, match in enumerate(matches):
        end = matches[i + 1].start() if i + 1 < len(matches) else len(body)
        value = body[match.end():end].strip().rstrip(",;").strip()
        fields.append((match.group(1), value))
    return description, fields


def _format_record(segment: str) -> str:
    header = _RECORD_HEADER.match(segment.strip())
    if header is None:
        return segment.strip()

    number, name, body = header.groups()
    description, fields = _split_fields(body)

    title = f"{number}. **{name.strip()}**"
    if description:
        title = f"{title} {description}"
    lines = [title]
    lines.extend(f"   - {label}: {value}" for label, value in fields)
    return "\n".join(lines)


def reflow_numbered_records(text: str) -> str:
    """
    Put each "N. **Name** ..." record on its own paragraph with one line per field.

    Text before the first record stays as an intro paragraph. A trailing
    paragraph after the last record (separated by a blank line) is kept
    as an outro. Text without records is returned unchanged.

    Example:
        "Found: 1. **Dr. A** Address: Main 1 Phone: 123"
        -> "Found:\\n\\n1. **Dr. A**\\n   - Address: Main 1\\n   - Phone: 123"
    """
    if not text:
        return text

    starts = [m.start() for m in _RECORD_START.finditer(text)]
    if not starts:
        return text

    intro = text[: starts[0]].strip()
    segments = [
        text[start:end]
        for start, end in zip(starts, starts[1:] + [len(text)])
    ]

    outro = ""
    last = segments[-1].strip()
    if "\n\n" in last:
        last, outro = last.split("\n\n", 1)
        outro = outro.strip()
    segments[-1] = last

    blocks = [intro] if intro else []
    blocks.extend(_format_record(segment) for segment in segments)
    if outro:
        blocks.append(outro)
    return "\n\n".join(blocks)
