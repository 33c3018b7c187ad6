from flask import jsonify, request


def ok(data=None, message=None, status: int = 200):
    body = {"data": data}
    if message:
        body["message"] = message
    return jsonify(body), status


def error(code: str, message: str, status: int, details=None):
    err = {"code": code, "message": message}
    if details:
        err["details"] = details
    return jsonify({"error": err}), status


def payload() -> dict:
    """JSON body, falling back to form fields."""
    return request.get_json(silent=True) or request.form.to_dict()
