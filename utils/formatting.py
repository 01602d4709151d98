def format_size(n: int) -> str:
    """Human-readable byte count (1024-based)."""
    if n >= 1_048_576:
        return f"{n / 1_048_576:.1f}MB"
    if n >= 1024:
        return f"{n / 1024:.1f}KB"
    return f"{n}B"
