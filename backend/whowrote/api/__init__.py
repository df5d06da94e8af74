from flask import request


def request_payload() -> dict:
    """JSON body as a dict; anything else (missing, malformed, a list) reads as empty."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}
