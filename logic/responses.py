from flask import jsonify


def success(data=None, message=None, status=200, **extra):
    body = {"success": True}
    if message:
        body["message"] = message
    if isinstance(data, list):
        body["count"] = len(data)
    body["data"] = data
    body.update(extra)
    return jsonify(body), status


def failure(message, status):
    return jsonify({"success": False, "message": message}), status
