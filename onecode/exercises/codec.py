import base64
import binascii

from onecode.core.errors import BadInput
from onecode.core.messages import ERROR_MESSAGES

# Hidden tests run after the user's code in the same source file
CODE_TESTS_SEPARATOR = "\n\n"


def decode_code(encoded: str) -> str:
    """Decode a standard base64 payload into source text, BadInput on failure"""
    try:
        return base64.b64decode(encoded, validate=True).decode("utf-8")
    except (binascii.Error, ValueError, TypeError) as e:
        raise BadInput(ERROR_MESSAGES["invalid_code_encoding"], details=str(e))


def encode_code(source: str) -> str:
    return base64.b64encode(source.encode("utf-8")).decode("ascii")


def combine_code_with_tests(user_code: str, tests: str) -> str:
    return f"{user_code}{CODE_TESTS_SEPARATOR}{tests}"
