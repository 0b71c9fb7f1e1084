from utils.constants import NULL_SUB_COLLECTION_NAME


def clean_name(name: str | None) -> str:
    """Trimmed name; None counts as empty."""
    return (name or '').strip()


def is_reserved_name(name: str | None) -> bool:
    return clean_name(name).casefold() == NULL_SUB_COLLECTION_NAME.casefold()


def optional_text(value) -> str | None:
    """
    Trimmed text from an export file field, or None when the field is
    missing, not a string, or blank.
    """
    if not isinstance(value, str):
        return None
    text = value.strip()
    return text or None
