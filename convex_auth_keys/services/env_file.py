"""
Reading and upserting KEY=value lines in .env style files.
"""
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping, Optional

ASSIGNMENT_RE = re.compile(r"^\s*([A-Za-z_][A-Za-z0-9_]*)=")
LINE_SPLIT_RE = re.compile(r"\r?\n")


@dataclass(frozen=True)
class EnvLine:
    """One line of an env file. `key` is set for assignment lines only."""
    text: str
    key: Optional[str] = None

    @property
    def is_assignment(self) -> bool:
        return self.key is not None


def parse_env_lines(content: str) -> List[EnvLine]:
    """
    Split file content into typed line records.

    Args:
        content: Raw file content, possibly empty

    Returns:
        One EnvLine per line, in file order
    """
    if not content:
        return []
    lines = []
    for text in LINE_SPLIT_RE.split(content):
        match = ASSIGNMENT_RE.match(text)
        lines.append(EnvLine(text=text, key=match.group(1) if match else None))
    return lines


def render_env_lines(lines: List[EnvLine]) -> str:
    """Join lines back into file content ending in a single newline."""
    return "\n".join(line.text for line in lines) + "\n"


def upsert_env_vars(existing: str, updates: Mapping[str, str]) -> str:
    """
    Replace or append assignments for the given keys.

    Tracked assignments are rewritten in place. Non-blank, non-assignment
    lines directly after a rewritten assignment are dropped: they are left
    over from an earlier multi-line value (typically an unquoted PEM key).
    Keys not found in the file are appended in mapping order, separated
    from the existing content by one blank line.

    Args:
        existing: Current file content
        updates: Key to already-escaped value

    Returns:
        New file content
    """
    lines = parse_env_lines(existing)
    while lines and lines[-1].text == "":
        lines.pop()

    out: List[EnvLine] = []
    remaining = [key for key in updates]
    i = 0
    while i < len(lines):
        line = lines[i]
        i += 1
        if line.key is None or line.key not in updates:
            out.append(line)
            continue

        out.append(EnvLine(text=f"{line.key}={updates[line.key]}", key=line.key))
        if line.key in remaining:
            remaining.remove(line.key)

        while i < len(lines) and lines[i].text and not lines[i].is_assignment:
            i += 1

    if out and remaining:
        out.append(EnvLine(text=""))
    for key in remaining:
        out.append(EnvLine(text=f"{key}={updates[key]}", key=key))

    return render_env_lines(out)


def get_env_var(content: str, key: str) -> Optional[str]:
    """
    Read a single-line value for `key` from env file content.

    Surrounding quotes are stripped and literal "\\n" sequences become
    newlines. No other unescaping is done.

    Args:
        content: File content
        key: Variable name

    Returns:
        The value, or None if the key is not assigned
    """
    match = re.search(rf"^\s*{re.escape(key)}=([^\n\r]*)", content, re.MULTILINE)
    if not match:
        return None
    value = match.group(1).strip()
    if value[:1] in ("'", '"') and value.endswith(value[0]):
        value = value[1:-1]
    return value.replace("\\n", "\n")


def read_env_file(path: Path) -> str:
    """
    Read the env file; a missing or unreadable file counts as empty.

    Undecodable bytes are kept as surrogates so write_env_file restores them.
    """
    try:
        return path.read_text(encoding="utf-8", errors="surrogateescape")
    except OSError:
        return ""


def write_env_file(path: Path, content: str) -> None:
    """Overwrite the env file with `content`."""
    path.write_text(content, encoding="utf-8", errors="surrogateescape")
