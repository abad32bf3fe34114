"""Unified diff generation and parsing.

Generation is positional: line i of the original is compared with line i of
the modified text. That is enough for manifests whose keys keep their
position, and it over-reports when keys move. Hunk building
(positional_hunks) is kept apart from serialization (format_patch) so a
different hunk builder can be dropped in without touching callers.
"""

from collections.abc import Callable, Sequence

from unidiff import Hunk, PatchedFile, PatchSet
from unidiff.constants import DEV_NULL

from .constants import DIFF_CONTEXT_LINES
from .models import DiffChange, DiffFile, DiffHunk

HunkBuilder = Callable[[Sequence[str], Sequence[str]], list[DiffHunk]]


def positional_hunks(
    original_lines: Sequence[str],
    modified_lines: Sequence[str],
    context: int = DIFF_CONTEXT_LINES,
) -> list[DiffHunk]:
    """Compare two line sequences position by position.

    A hunk opens on the first differing line with up to `context` lines of
    preceding unchanged text, and closes once `context` unchanged lines have
    followed the last change. Past the end of the shorter side, lines are
    pure inserts or deletes.
    """
    hunks: list[DiffHunk] = []
    start: int | None = None
    body: list[tuple[str, str]] = []
    trailing = 0
    # Leading context never reaches back into a flushed hunk
    floor = 0

    for i in range(max(len(original_lines), len(modified_lines))):
        has_original = i < len(original_lines)
        has_modified = i < len(modified_lines)

        if has_original and has_modified and original_lines[i] == modified_lines[i]:
            if start is None:
                continue
            body.append(("normal", original_lines[i]))
            trailing += 1
            if trailing >= context:
                hunks.append(_build_hunk(start, body))
                start, body, floor = None, [], i + 1
            continue

        if start is None:
            start = max(floor, i - context)
            body = [("normal", original_lines[j]) for j in range(start, i)]
        trailing = 0

        if has_original:
            body.append(("delete", original_lines[i]))
        if has_modified:
            body.append(("insert", modified_lines[i]))

    if start is not None:
        hunks.append(_build_hunk(start, body))

    return hunks


def _build_hunk(start: int, body: list[tuple[str, str]]) -> DiffHunk:
    old_line = new_line = start + 1
    changes = []
    for change_type, content in body:
        if change_type == "normal":
            changes.append(DiffChange(change_type, content, old_line, new_line))
            old_line += 1
            new_line += 1
        elif change_type == "delete":
            changes.append(DiffChange(change_type, content, old_line_number=old_line))
            old_line += 1
        else:
            changes.append(DiffChange(change_type, content, new_line_number=new_line))
            new_line += 1

    old_count = old_line - (start + 1)
    new_count = new_line - (start + 1)
    return DiffHunk(
        # An empty side points at the line before the hunk, as git does
        old_start=start + 1 if old_count else start,
        old_lines=old_count,
        new_start=start + 1 if new_count else start,
        new_lines=new_count,
        changes=tuple(changes),
    )


def format_patch(hunks: Sequence[DiffHunk], path: str = "package.json") -> str:
    """Serialize hunks as a git-style patch for a single file."""
    output = [
        f"diff --git a/{path} b/{path}",
        "index 0000000..1111111 100644",
        f"--- a/{path}",
        f"+++ b/{path}",
    ]
    for hunk in hunks:
        output.append(hunk.content)
        output.extend(f"{change.prefix}{change.content}" for change in hunk.changes)
    return "\n".join(output) + "\n"


def generate_diff(
    original_text: str,
    modified_text: str,
    path: str = "package.json",
    hunk_builder: HunkBuilder = positional_hunks,
) -> str:
    """Produce a unified diff between two texts."""
    hunks = hunk_builder(original_text.split("\n"), modified_text.split("\n"))
    return format_patch(hunks, path)


def parse_diff(text: str) -> list[DiffFile]:
    """Parse a git unified diff into files and hunks.

    Raises:
        UnidiffParseError: If the text is not a well-formed unified diff
    """
    return [_to_diff_file(patched_file) for patched_file in PatchSet.from_string(text)]


def _to_diff_file(patched_file: PatchedFile) -> DiffFile:
    old_path = _strip_path(patched_file.source_file, "a/")
    new_path = _strip_path(patched_file.target_file, "b/")

    if patched_file.is_added_file:
        change_type = "add"
    elif patched_file.is_removed_file:
        change_type = "delete"
    elif patched_file.is_rename:
        change_type = "rename"
    else:
        change_type = "modify"

    return DiffFile(
        # /dev/null sides keep the path of the other side
        old_path=old_path or new_path,
        new_path=new_path or old_path,
        type=change_type,
        hunks=tuple(_to_diff_hunk(hunk) for hunk in patched_file),
        is_binary=patched_file.is_binary_file,
    )


def _to_diff_hunk(hunk: Hunk) -> DiffHunk:
    changes = []
    for line in hunk:
        content = line.value.removesuffix("\n")
        if line.is_added:
            changes.append(DiffChange("insert", content, new_line_number=line.target_line_no))
        elif line.is_removed:
            changes.append(DiffChange("delete", content, old_line_number=line.source_line_no))
        elif line.is_context:
            changes.append(
                DiffChange("normal", content, line.source_line_no, line.target_line_no)
            )

    return DiffHunk(
        old_start=hunk.source_start,
        old_lines=hunk.source_length,
        new_start=hunk.target_start,
        new_lines=hunk.target_length,
        changes=tuple(changes),
    )


def _strip_path(path: str | None, prefix: str) -> str:
    if not path or path == DEV_NULL:
        return ""
    return path[len(prefix):] if path.startswith(prefix) else path
