from flask import Flask, request, jsonify
from flask_cors import CORS

from prodgen.errors import GrammarError
from prodgen.generator import generate_strings
from prodgen.grammar_parser import parse_grammar
from prodgen.tree_builder import grammar_to_tree

app = Flask(__name__)
CORS(app)

app.config.from_mapping(
    MAX_STRINGS=10,     # strings per /generate call when "count" is omitted
    COUNT_LIMIT=1000,   # upper bound accepted for "count"
    SEED=None,          # default seed; None draws a fresh one per call
)
# PRODGEN_MAX_STRINGS=20, PRODGEN_SEED=7, ...
app.config.from_prefixed_env(prefix="PRODGEN")

# Global stored grammar state
GLOBAL_GRAMMAR = None
GLOBAL_START = None


def _error(message):
    return jsonify({"success": False, "message": message})


def _request_data():
    """JSON object sent with the request, {} when absent; None when it is not an object."""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    return data if isinstance(data, dict) else None


# =====================================================================
#  1. SET GRAMMAR
# =====================================================================
@app.route("/set_grammar", methods=["POST"])
def set_grammar():
    global GLOBAL_GRAMMAR, GLOBAL_START

    data = _request_data()
    if data is None:
        return _error("Grammar Error: request body must be a JSON object.")
    text = data.get("grammar", "")
    start = data.get("start") or ""

    if not isinstance(text, str) or not text.strip():
        return _error("Grammar Error: no production rules given.")
    if not isinstance(start, str):
        return _error("Grammar Error: start must be a string.")
    start = start.strip()

    try:
        grammar = parse_grammar(text)
    except GrammarError as e:
        app.logger.info("rejected grammar: %s", e)
        return _error(f"Grammar Error: {e}")

    if start and start not in grammar:
        return _error(f"Grammar Error: start symbol '{start}' is not defined.")

    GLOBAL_GRAMMAR = grammar
    GLOBAL_START = start or grammar.start
    app.logger.info("grammar set: %d nonterminal(s), start %s", len(grammar), GLOBAL_START)

    return jsonify({
        "success": True,
        "message": "Grammar successfully parsed.",
        "start": GLOBAL_START,
        "nonterminals": list(grammar.nonterminals)
    })


# =====================================================================
#  2. GENERATE STRINGS
# =====================================================================
@app.route("/generate", methods=["POST"])
def generate():
    if GLOBAL_GRAMMAR is None:
        return _error("Grammar is not set.")

    data = _request_data()
    if data is None:
        return _error("request body must be a JSON object.")
    count = data.get("count", app.config["MAX_STRINGS"])
    seed = data.get("seed", app.config["SEED"])
    start = data.get("start") or GLOBAL_START

    if not isinstance(count, int) or isinstance(count, bool) or not 0 < count <= app.config["COUNT_LIMIT"]:
        return _error(f"count must be an integer between 1 and {app.config['COUNT_LIMIT']}.")
    if seed is not None and not isinstance(seed, (int, str)):
        return _error("seed must be an integer or a string.")
    if not isinstance(start, str) or start not in GLOBAL_GRAMMAR:
        return _error(f"Unknown start symbol '{start}'.")

    try:
        generated = generate_strings(GLOBAL_GRAMMAR, start, count=count, seed=seed)
    except GrammarError as e:
        app.logger.warning("generation from %s failed: %s", start, e)
        return _error(str(e))
    return jsonify({"success": True, "generated": generated})


# =====================================================================
#  3. INSPECT GRAMMAR
# =====================================================================
@app.route("/grammar")
def grammar_tree():
    if GLOBAL_GRAMMAR is None:
        return _error("Grammar is not set.")
    return jsonify({"success": True, "tree": grammar_to_tree(GLOBAL_GRAMMAR)})


# =====================================================================
#  HEALTH CHECK
# =====================================================================
@app.route("/ping")
def ping():
    return jsonify({"status": "OK", "message": "Server running"})


# =====================================================================
#  RUN
# =====================================================================
if __name__ == "__main__":
    app.run(debug=True)
