from flask import Flask, request, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException
import os
import traceback
from dataclasses import asdict

from chemistry import (
    CHEMICAL_RANGES, ChemicalKind, READING_FIELDS,
    classify, recommend, parse_reading, evaluate_readings, format_readings,
)
import visit_store

DEFAULT_DB_PATH = os.environ.get("POOL_DB_PATH", "pool_data.db")


class InvalidRequest(ValueError):
    pass


def _json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidRequest("Request body must be a JSON object")
    return data


def _chemical(data):
    chem_id = data.get("chemical")
    try:
        return ChemicalKind(chem_id)
    except ValueError:
        valid = ", ".join(k.value for k in ChemicalKind)
        raise InvalidRequest(f"Unknown chemical '{chem_id}' (expected one of: {valid})")


def _pool_gallons(data):
    gallons = parse_reading(data.get("pool_gallons"))
    if gallons is None or gallons <= 0:
        raise InvalidRequest("pool_gallons must be a positive number")
    return gallons


def _readings(data):
    readings = data.get("readings") or {}
    if not isinstance(readings, dict):
        raise InvalidRequest("readings must be an object")
    return {f: parse_reading(readings.get(f)) for f in READING_FIELDS.values()}


def create_app(config=None):
    app = Flask(__name__)
    CORS(app)
    app.config["DATABASE"] = DEFAULT_DB_PATH
    if config:
        app.config.update(config)

    visit_store.init_db(app.config["DATABASE"])

    @app.errorhandler(InvalidRequest)
    def bad_request(e):
        print(f"Bad request to {request.path}: {e}")
        return jsonify({"error": str(e)}), 400

    @app.errorhandler(Exception)
    def server_error(e):
        if isinstance(e, HTTPException):
            return e
        print(f"An unexpected error occurred: {e}")
        traceback.print_exc()
        return jsonify({"error": f"Internal server error: {e}"}), 500

    @app.route('/', methods=['GET'])
    def home():
        return jsonify({"message": "Welcome to the Pool Chemistry Assistant!"})

    @app.route('/ranges', methods=['GET'])
    def get_ranges():
        return jsonify({kind.value: asdict(rng) for kind, rng in CHEMICAL_RANGES.items()})

    @app.route('/classify', methods=['POST'])
    def classify_reading():
        data = _json_body()
        kind = _chemical(data)
        value = parse_reading(data.get("value"))
        return jsonify({"chemical": kind.value, "status": classify(kind, value).value})

    @app.route('/recommend', methods=['POST'])
    def recommend_dosage():
        data = _json_body()
        kind = _chemical(data)
        gallons = _pool_gallons(data)
        value = parse_reading(data.get("value"))
        return jsonify({
            "chemical": kind.value,
            "status": classify(kind, value).value,
            "recommendation": recommend(kind, value, gallons),
        })

    @app.route('/visits', methods=['POST'])
    def create_visit():
        data = _json_body()
        client = str(data.get("client") or "").strip()
        if not client:
            raise InvalidRequest("client is required")
        gallons = _pool_gallons(data)
        readings = _readings(data)

        visit_id = visit_store.save_visit(app.config["DATABASE"], client, gallons,
                                          readings, notes=data.get("notes"))
        print(f"Saved visit {visit_id} for {client}")
        return jsonify({
            "id": visit_id,
            "client": client,
            "pool_gallons": gallons,
            "summary": format_readings(readings),
            "results": evaluate_readings(readings, gallons),
        }), 201

    @app.route('/visits', methods=['GET'])
    def get_visits():
        try:
            limit = int(request.args.get("limit", 50))
        except ValueError:
            raise InvalidRequest("limit must be an integer")
        if limit <= 0:
            raise InvalidRequest("limit must be a positive integer")
        visits = visit_store.list_visits(app.config["DATABASE"],
                                         client=request.args.get("client"), limit=limit)
        for visit in visits:
            visit["summary"] = format_readings(visit["readings"])
        return jsonify(visits)

    @app.route('/visits/latest', methods=['GET'])
    def get_latest_visit():
        client = request.args.get("client")
        if not client:
            raise InvalidRequest("client is required")
        visit = visit_store.latest_visit(app.config["DATABASE"], client)
        if visit is None:
            return jsonify({"error": f"No visits found for {client}"}), 404
        visit["summary"] = format_readings(visit["readings"])
        visit["results"] = evaluate_readings(visit["readings"], visit["pool_gallons"])
        return jsonify(visit)

    return app


if __name__ == '__main__':
    create_app().run(debug=True)
