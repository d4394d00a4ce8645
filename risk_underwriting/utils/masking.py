from typing import Optional

MASK = "****"


def mask_sensitive_data(data: Optional[str]) -> str:
    """
    Mask an identifier before it goes into a log or audit entry.
    Keeps the first and last two characters, e.g. "CUST0042" -> "CU****42".
    """
    if data is None or len(data) <= 4:
        return MASK
    return f"{data[:2]}{MASK}{data[-2:]}"
