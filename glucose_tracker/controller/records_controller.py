# glucose_tracker/controller/records_controller.py
from flask import Blueprint, current_app, jsonify, request

from glucose_tracker.mappers.record_mapper import record_to_dict
from glucose_tracker.services.record_service import RecordService
from glucose_tracker.services.stats_service import StatsService
from glucose_tracker.utils.jwt_utils import get_current_user_id, identity_required

records_bp = Blueprint("records", __name__, url_prefix="/api/records")


def get_record_guard():
    return current_app.extensions["record_guard"]


@records_bp.route("", methods=["GET"])
@identity_required
def list_records():
    user_id = get_current_user_id()
    records = RecordService.list_records(get_record_guard(), user_id)
    return jsonify([record_to_dict(r) for r in records]), 200


@records_bp.route("", methods=["POST"])
@identity_required
def create_record():
    user_id = get_current_user_id()
    data = request.get_json(silent=True)

    record, error = RecordService.create_record(get_record_guard(), user_id, data)
    if error:
        return error.to_response()

    return jsonify(record_to_dict(record)), 201


@records_bp.route("/stats", methods=["GET"])
@identity_required
def get_stats():
    user_id = get_current_user_id()
    tz_offset, error = StatsService.parse_tz_offset(request.args.get("tzOffset"))
    if error:
        return jsonify({"error": error}), 400

    summary = StatsService.get_summary(get_record_guard(), user_id, tz_offset)
    return jsonify(summary), 200


@records_bp.route("/<int:record_id>", methods=["GET"])
@identity_required
def get_record(record_id):
    user_id = get_current_user_id()
    record, error = RecordService.get_record(get_record_guard(), user_id, record_id)
    if error:
        return error.to_response()

    return jsonify(record_to_dict(record)), 200


@records_bp.route("/<int:record_id>", methods=["PUT"])
@identity_required
def update_record(record_id):
    user_id = get_current_user_id()
    data = request.get_json(silent=True)

    record, error = RecordService.update_record(get_record_guard(), user_id, record_id, data)
    if error:
        return error.to_response()

    return jsonify(record_to_dict(record)), 200


@records_bp.route("/<int:record_id>", methods=["DELETE"])
@identity_required
def delete_record(record_id):
    user_id = get_current_user_id()
    _, error = RecordService.delete_record(get_record_guard(), user_id, record_id)
    if error:
        return error.to_response()

    return "", 204
