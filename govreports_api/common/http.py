# govreports_api/common/http.py
from io import BytesIO

from flask import jsonify, send_file

def ok(data=None, status=200, **meta):
    payload = {"success": True, "data": data}
    if meta:
        payload["meta"] = meta
    return jsonify(payload), status

def fail(message="Bad Request", status=400, code=None, detail=None, errors=None):
    err = {"message": message}
    if code: err["code"] = code
    if detail: err["detail"] = detail
    if errors: err["errors"] = errors
    return jsonify({"success": False, "error": err}), status

def send_report(report):
    """Stream a ReportFile (content, filename, content_type) as a download."""
    return send_file(
        BytesIO(report.content),
        mimetype=report.content_type,
        as_attachment=True,
        download_name=report.filename,
    )
