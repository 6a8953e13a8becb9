def strip_data_uri(value: str) -> str:
    """Drop a leading data:<mime>;base64, prefix, leaving the raw payload."""
    if value.startswith("data:") and "base64," in value:
        return value.split("base64,", 1)[1]
    return value
