_STRIPPED = ".,!?'\""


def generate_slug(name: str) -> str:
    """Tag slug: lowercase, spaces to hyphens, `.,!?'"` removed. Nothing else is touched."""
    slug = (name or "").lower().replace(" ", "-")
    for ch in _STRIPPED:
        slug = slug.replace(ch, "")
    return slug
