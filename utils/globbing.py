def _split_alternatives(body: str) -> list[str]:
    """Split brace contents on commas that are not inside nested braces."""
    parts, depth, start = [], 0, 0
    for i, c in enumerate(body):
        if c == "{":
            depth += 1
        elif c == "}" and depth:
            depth -= 1
        elif c == "," and depth == 0:
            parts.append(body[start:i])
            start = i + 1
    parts.append(body[start:])
    return parts


def expand_braces(pattern: str) -> list[str]:
    """Expand ``{a,b}`` alternatives into separate glob patterns.

    ``*.{png,jpg}`` -> ``["*.png", "*.jpg"]``. Nested braces expand
    recursively; a brace group without a comma (``{a}``) stays literal.
    """
    depth, start = 0, 0
    for i, c in enumerate(pattern):
        if c == "{":
            if depth == 0:
                start = i
            depth += 1
        elif c == "}" and depth:
            depth -= 1
            if depth == 0:
                alternatives = _split_alternatives(pattern[start + 1 : i])
                if len(alternatives) > 1:
                    head, tail = pattern[:start], pattern[i + 1 :]
                    expanded = [
                        p for alt in alternatives for p in expand_braces(head + alt + tail)
                    ]
                    return list(dict.fromkeys(expanded))
    return [pattern]
