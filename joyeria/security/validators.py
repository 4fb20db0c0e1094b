"""
Screening of free-text login/recovery input for SQL injection and XSS
patterns. The ORM already parameterizes queries; this rejects obviously
hostile input early with a clear message.
"""
import re

SQL_INJECTION_PATTERNS = [
    re.compile(r"(\bOR\b|\bAND\b)\s*['\"]?\d+['\"]?\s*=\s*['\"]?\d+['\"]?", re.IGNORECASE),
    re.compile(r"(\bUNION\b|\bSELECT\b|\bINSERT\b|\bUPDATE\b|\bDELETE\b|\bDROP\b|\bCREATE\b)", re.IGNORECASE),
    re.compile(r"--\s*$"),
    re.compile(r";.*?(?:DROP|DELETE|TRUNCATE|UPDATE|INSERT)", re.IGNORECASE),
    re.compile(r"('\s*OR\s*'.*'='|'\s*OR\s*1\s*=\s*1)", re.IGNORECASE),
    re.compile(r"\"\s*OR\s*\"\s*=\s*\"", re.IGNORECASE),
    re.compile(r"(`|%27|%23)", re.IGNORECASE),
]

XSS_PATTERNS = [
    re.compile(r"<script[^>]*>.*?</script>", re.IGNORECASE | re.DOTALL),
    re.compile(r"javascript:", re.IGNORECASE),
    re.compile(r"<iframe[^>]*>", re.IGNORECASE),
    re.compile(r"<svg[^>]*>", re.IGNORECASE),
    re.compile(r"on\w+\s*=", re.IGNORECASE),
    re.compile(r"<img[^>]*on", re.IGNORECASE),
    re.compile(r"eval\s*\(", re.IGNORECASE),
    re.compile(r"expression\s*\(", re.IGNORECASE),
    re.compile(r"<embed[^>]*>", re.IGNORECASE),
    re.compile(r"<object[^>]*>", re.IGNORECASE),
]

# Passwords may contain almost anything; only the blatant cases are refused
PASSWORD_PATTERNS = [
    re.compile(r";\s*(?:DROP|DELETE|TRUNCATE)", re.IGNORECASE),
    re.compile(r"<script", re.IGNORECASE),
    re.compile(r"javascript:", re.IGNORECASE),
]

CONTROL_CHARS = re.compile(r"[\x00-\x1F\x7F]")
HTML_TAGS = re.compile(r"<[^>]*>")


def check_input_security(value, field_name='Campo'):
    """Return an error message for hostile input, or None when it is acceptable"""
    if not value or not isinstance(value, str):
        return f"{field_name} no puede estar vacío"

    for pattern in SQL_INJECTION_PATTERNS:
        if pattern.search(value):
            return f"{field_name} contiene caracteres o patrones no permitidos (SQL injection detected)"

    for pattern in XSS_PATTERNS:
        if pattern.search(value):
            return f"{field_name} contiene caracteres o patrones no permitidos (XSS detected)"

    return None


def check_email_security(email):
    if not email or not isinstance(email, str):
        return "El email es requerido"
    return check_input_security(email, 'Email')


def check_password_security(password):
    if not password or not isinstance(password, str):
        return "La contraseña es requerida"
    for pattern in PASSWORD_PATTERNS:
        if pattern.search(password):
            return "La contraseña contiene caracteres no permitidos"
    return None


def sanitize_input(value):
    """Strip HTML tags and control characters"""
    if not value or not isinstance(value, str):
        return ''
    return CONTROL_CHARS.sub('', HTML_TAGS.sub('', value)).strip()
