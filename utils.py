import re


def validate_email(email):
    return re.match(r'^[\w\.-]+@[\w\.-]+\.\w+$', email or "")

def validate_phone(phone):
    return re.match(r'^\+?\d{9,15}$', phone or "")

def clean(value):
    """Strip strings coming from JSON payloads; anything else becomes ''."""
    return value.strip() if isinstance(value, str) else ""

def is_truthy(value):
    return (value or "").strip().lower() in ("1", "true", "t", "yes", "y")
