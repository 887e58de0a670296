"""
Sanitization of AWS SDK errors.

Error text from the remote service may carry request ids and account ids.
sanitize_error() reduces an exception to a message that is safe to surface
to callers and to write into controller status fields.
"""

import re

from botocore.exceptions import ClientError

_REQUEST_ID = re.compile(r"\s*,?\s*(?:request\s?id|requestid)\s*[:=]\s*[A-Za-z0-9-]+", re.IGNORECASE)
_ACCOUNT_ID = re.compile(r"(arn:aws[a-zA-Z-]*:[a-z0-9-]*:[a-z0-9-]*:)\d{12}(?=:)")


def sanitize_error(exc: BaseException) -> str:
    if isinstance(exc, ClientError):
        error = exc.response.get("Error", {})
        code = error.get("Code", "Unknown")
        message = error.get("Message", "")
        text = f"{code}: {message}" if message else code
    else:
        text = str(exc)
    text = _REQUEST_ID.sub("", text)
    return _ACCOUNT_ID.sub(r"\1***", text).strip()
