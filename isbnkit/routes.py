import logging

from flask import Blueprint, current_app, jsonify, request

from isbnkit.services.isbn import FORMATS, parse
from isbnkit.utils.messages import ERROR_UNKNOWN_FORMAT

logger = logging.getLogger(__name__)

bp = Blueprint("api", __name__, url_prefix="/api/v1")


def _ranges():
    return current_app.extensions['isbn_ranges']


@bp.route("/isbn/<path:code>", methods=["GET"])
def get_isbn(code):
    """
    Parse a code and return its parts, errors and formatted variants.

    Query parameters:
        format: return only this format ('ISBN-10', 'ISBN-13', 'ISBN', 'GTIN-14', 'EAN')
        prefix: GTIN-14 logistic indicator (default from DEFAULT_GTIN14_PREFIX)
    """
    fmt = request.args.get("format")
    if fmt is not None and fmt.strip().upper() not in FORMATS:
        return jsonify({"error": ERROR_UNKNOWN_FORMAT % {
            'format': fmt, 'formats': ', '.join(FORMATS)}}), 400

    isbn = parse(code, ranges=_ranges())
    if not isbn.is_valid():
        return jsonify(isbn.to_dict()), 422

    prefix = request.args.get("prefix", current_app.config['DEFAULT_GTIN14_PREFIX'])
    try:
        if fmt is None:
            return jsonify(isbn.to_dict(prefix))
        formatted = isbn.format(fmt, prefix)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    return jsonify({
        "input": isbn.raw,
        "format": fmt.strip().upper(),
        "isbn": formatted,
        "checksum": isbn.checksum(fmt, prefix),
    })


@bp.route("/ranges", methods=["GET"])
def get_ranges():
    """Metadata of the loaded range dataset."""
    return jsonify(_ranges().describe())
