from flask import jsonify
from marshmallow import ValidationError

from ..constants.service_code import HTTP_STATUS_CODES


# Handle ValidationError
def handle_validation_error(error: ValidationError):
    response = {
        "success": False,
        "error": "Validation Error",
        "message": error.messages,
        "status_code": HTTP_STATUS_CODES["BAD_REQUEST"],
    }
    return jsonify(response), HTTP_STATUS_CODES["BAD_REQUEST"]

