from flask import Flask, request, jsonify
from flask_cors import CORS
import threading, os, json, time

from solver import InvalidInput, solve_cryptarithm, validate_words  # z3-backed solver

app = Flask(__name__)
CORS(app)

# Path to trace file
TRACE_PATH = os.environ.get(
    "CRYPTARITHM_TRACE_PATH",
    os.path.join(os.path.dirname(os.path.abspath(__file__)), "trace.json"),
)


def timeout_from_env(raw):
    """Milliseconds from CRYPTARITHM_TIMEOUT_MS; unset or malformed means no timeout."""
    if not raw:
        return None
    try:
        value = int(raw)
    except ValueError:
        value = -1
    if value < 0:
        app.logger.warning("ignoring CRYPTARITHM_TIMEOUT_MS=%r, expected a non-negative integer", raw)
        return None
    return value


TIMEOUT_MS = timeout_from_env(os.environ.get("CRYPTARITHM_TIMEOUT_MS"))


# --------------------------------------------------
# Utility: Run solver in a background thread
# --------------------------------------------------
def run_solver(lhs_words, rhs_words, trace_path, timeout_ms=None):
    """
    Runs solver in a thread, writes the trace file when done.
    """
    # Safely remove old trace if possible
    if os.path.exists(trace_path):
        for _ in range(5):  # retry up to 5 times
            try:
                os.remove(trace_path)
                break
            except PermissionError:
                # File might still be used by another process (like a previous fetch)
                time.sleep(0.3)
            except OSError as e:
                app.logger.warning("couldn't remove old trace: %s", e)
                break

    try:
        solve_cryptarithm(lhs_words, rhs_words, timeout_ms=timeout_ms, trace_path=trace_path)
    except Exception:
        app.logger.exception("Solver error")


def words_from_payload(data):
    """Accepts {"lhs": [...], "rhs": [...]} or the older {"words": [...], "result": "..."}."""
    if not isinstance(data, dict):
        raise InvalidInput("request body must be a JSON object")
    if "lhs" in data or "rhs" in data:
        return data.get("lhs") or [], data.get("rhs") or []
    result = data.get("result") or ""
    if not isinstance(result, str):
        raise InvalidInput("result must be a single word")
    return data.get("words") or [], [result] if result else []


def read_trace(path):
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def trace_response(events):
    # Only report ready when solver has fully completed
    ready = bool(events) and events[-1].get("type") == "SOLVER_DONE"
    return jsonify({"ready": ready, "events": events})


# --------------------------------------------------
# Routes
# --------------------------------------------------
@app.route("/solve", methods=["POST"])
def solve():
    """
    Starts solving (non-blocking thread).

    Expected JSON:
    {
      "lhs": ["SEND", "MORE"],
      "rhs": ["MONEY"]
    }
    """
    data = request.get_json(silent=True) or {}
    try:
        lhs_words, rhs_words = words_from_payload(data)
        validate_words(lhs_words, rhs_words)
    except InvalidInput as e:
        return jsonify({"status": "rejected", "error": str(e)}), 400

    # Start background solver thread
    t = threading.Thread(
        target=run_solver,
        args=(lhs_words, rhs_words, TRACE_PATH, TIMEOUT_MS),
        daemon=True,
    )
    t.start()

    return jsonify({"status": "started", "lhs": lhs_words, "rhs": rhs_words})


@app.route("/trace", methods=["GET"])
def trace():
    """
    Returns JSON:
    {
      "ready": true/false,
      "events": [...]
    }
    """
    if not os.path.exists(TRACE_PATH):
        return jsonify({"ready": False, "events": []})

    try:
        return trace_response(read_trace(TRACE_PATH))
    except json.JSONDecodeError:
        # caught the writer mid-dump, try once more
        time.sleep(0.5)
        try:
            return trace_response(read_trace(TRACE_PATH))
        except (OSError, json.JSONDecodeError):
            return jsonify({"ready": False, "events": []})


@app.route("/clear", methods=["POST"])
def clear():
    """Deletes the trace file to reset solver state."""
    if os.path.exists(TRACE_PATH):
        try:
            os.remove(TRACE_PATH)
        except OSError as e:
            app.logger.warning("couldn't delete trace file: %s", e)
    return jsonify({"cleared": True})


# --------------------------------------------------
# Main entry point
# --------------------------------------------------
if __name__ == "__main__":
    print("Cryptarithm solver API running at http://127.0.0.1:5000/")
    app.run(debug=True)
