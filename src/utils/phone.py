"""Phone number helpers."""


def normalize_phone(raw: str) -> str:
    """Return the canonical stored form of a phone number.

    Surrounding whitespace is stripped and a leading '+' is added when
    missing. Digits are not validated. Normalizing twice gives the same
    result as normalizing once.

    Args:
        raw: Phone number as entered, e.g. "9876500000" or " +9876500000".

    Returns:
        The '+'-prefixed phone number.
    """
    phone = raw.strip()
    if phone.startswith("+"):
        return phone
    return f"+{phone}"
