"""Docstring annotations.

Handlers document themselves with ``@`` lines in their docstring::

    async def handler(event):
        \"\"\"Get a user by id.

        Looks the user up in the primary store.

        @tag users
        @security bearer
        @response 404 User not found
        \"\"\"

Recognized: ``@tag``, ``@summary``, ``@description`` (repeatable, joined
with newlines), ``@security``, ``@deprecated``, ``@response <code> <text>``.
Unknown ``@`` lines are ignored.  Without ``@summary`` the first plain
line is the summary; without ``@description`` the remaining plain lines
are the description.
"""

from dataclasses import dataclass, field


@dataclass(slots=True)
class DocAnnotations:
    summary: str | None = None
    description: str | None = None
    tags: list[str] = field(default_factory=list)
    security: list[str] = field(default_factory=list)
    deprecated: bool = False
    responses: list[tuple[str, str]] = field(default_factory=list)


def _directive(line: str, name: str) -> str | None:
    """Return the argument of ``@name arg`` or None if *line* is not one."""
    prefix = f"@{name}"
    if not line.startswith(prefix):
        return None
    rest = line[len(prefix):]
    if rest and not rest[0].isspace():
        return None
    return rest.strip()


def parse_doc_annotations(docstring: str | None) -> DocAnnotations:
    """Parse the ``@`` annotations and plain text of *docstring*."""
    annot = DocAnnotations()
    if not docstring:
        return annot

    plain: list[str] = []
    explicit_summary = False
    explicit_description = False

    for raw in docstring.splitlines():
        line = raw.strip()
        if not line:
            continue

        if (value := _directive(line, "tag")) is not None:
            if value and value not in annot.tags:
                annot.tags.append(value)
        elif (value := _directive(line, "summary")) is not None:
            explicit_summary = True
            annot.summary = value
        elif (value := _directive(line, "description")) is not None:
            explicit_description = True
            if annot.description is None:
                annot.description = value
            else:
                annot.description = f"{annot.description}\n{value}"
        elif (value := _directive(line, "security")) is not None:
            if value:
                annot.security.append(value)
        elif _directive(line, "deprecated") is not None:
            annot.deprecated = True
        elif (value := _directive(line, "response")) is not None:
            code, _, text = value.partition(" ")
            if code:
                annot.responses.append((code, text.strip()))
        elif not line.startswith("@"):
            plain.append(line)

    if not explicit_summary and plain:
        annot.summary = plain.pop(0)
    if not explicit_description and plain:
        annot.description = "\n".join(plain)
    return annot
