"""
TST Lookup Service — a REST API over a ternary search tree.

Exposes the tree as a JSON API with endpoints for inserting words, exact
lookup, prefix completion, Hamming-distance neighbours, crossword patterns
and deletion.  Built with Flask.  Designed for containerized deployment.
"""

from __future__ import annotations

import io
import os
import time
import logging

from flask import Flask, Response, jsonify, request

from .locking import RWLock
from .tst import Tst

# ---------------------------------------------------------------------------
# Flask application
# ---------------------------------------------------------------------------

app = Flask(__name__)
logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")
logger = logging.getLogger("tst-service")

# Global tree instance — persists for the lifetime of the process.
# Request threads share it, so every access goes through the lock.
tree = Tst()
lock = RWLock()
_start_time = time.time()

MAX_KEY_LENGTH = 256
DEFAULT_LIMIT = 25

# Seed with sample data so the service is useful out-of-the-box
_SEED_WORDS = [
    "algorithm", "api", "application", "array", "authentication",
    "binary", "branch", "buffer", "build", "byte",
    "cache", "callback", "class", "client", "compiler",
    "container", "cpu", "database", "debug", "deploy",
    "docker", "endpoint", "exception", "flask", "function",
    "gateway", "git", "graph", "hash", "heap",
    "index", "interface", "json", "kernel", "lambda",
    "linked-list", "load-balancer", "memory", "microservice", "middleware",
    "node", "object", "parser", "pipeline", "pointer",
    "prefix-tree", "process", "queue", "recursion", "redis",
    "request", "response", "rest", "router", "runtime",
    "schema", "server", "socket", "stack", "stream",
    "thread", "token", "tree", "trie", "tuple",
    "upstream", "variable", "version", "webhook", "worker",
]

for word in _SEED_WORDS:
    tree.insert(word, word)
logger.info("Seeded tree with %d words", len(_SEED_WORDS))


def _query() -> str:
    return request.args.get("q", "").strip().lower()


def _limit() -> int:
    try:
        return int(request.args.get("limit", str(DEFAULT_LIMIT)))
    except ValueError:
        return DEFAULT_LIMIT


def _collect(it, limit: int) -> list[dict]:
    """Drain at most *limit* matches from a tree iterator."""
    matches = []
    try:
        for value in it:
            matches.append({"key": it.current_key(), "value": value})
            if len(matches) >= limit:
                break
    finally:
        it.close()
    return matches


def _missing_q():
    return jsonify({"error": "Missing query parameter 'q'"}), 400


# ── Health & Info ─────────────────────────────────────────────────────────

@app.route("/")
def index():
    """Landing page with API documentation."""
    return jsonify({
        "service": "TST Lookup Service",
        "version": "1.0.0",
        "description": "REST API for prefix, neighbour and wildcard lookup powered by a ternary search tree",
        "endpoints": {
            "GET  /":                              "This help page",
            "GET  /health":                        "Health check",
            "GET  /stats":                         "Tree statistics",
            "GET  /search?q=<key>":                "Exact match lookup",
            "GET  /prefix?q=<pfx>":                "Autocomplete — all keys starting with prefix",
            "GET  /neighbor?q=<key>&d=<n>":        "Same-length keys at most n characters away",
            "GET  /crossword?q=<pat>&joker=<c>":   "Same-length keys matching pattern, joker matches any character",
            "GET  /dot":                           "Graphviz description of the tree",
            "POST /insert":                        "Insert a key  {\"key\": \"...\", \"value\": \"...\"}",
            "DELETE /delete?q=<key>":              "Delete a key",
        },
    })


@app.route("/health")
def health():
    """Liveness / readiness probe."""
    with lock.read_lock():
        size = len(tree)
    return jsonify({
        "status": "healthy",
        "uptime_seconds": round(time.time() - _start_time, 2),
        "tree_size": size,
    })


@app.route("/stats")
def stats():
    """Tree statistics."""
    with lock.read_lock():
        shape = tree.stats()
    return jsonify({
        "total_keys": shape.count.values,
        "total_nodes": shape.count.nodes,
        "min_key_length": shape.key_len.min,
        "max_key_length": shape.key_len.max,
        "uptime_seconds": round(time.time() - _start_time, 2),
        "seed_words": len(_SEED_WORDS),
    })


# ── Core API ──────────────────────────────────────────────────────────────

@app.route("/search")
def search():
    """Exact key lookup."""
    q = _query()
    if not q:
        return _missing_q()
    with lock.read_lock():
        found = tree.contains_key(q)
        result = tree.get(q)
    return jsonify({"key": q, "found": found, "value": result})


@app.route("/prefix")
def prefix():
    """Return all keys sharing a given prefix (autocomplete)."""
    q = _query()
    if not q:
        return _missing_q()
    limit = _limit()
    with lock.read_lock():
        matches = _collect(tree.iter_complete(q), limit)
    return jsonify({"prefix": q, "count": len(matches), "matches": matches})


@app.route("/neighbor")
def neighbor():
    """Return keys of the same length within a Hamming distance."""
    q = _query()
    if not q:
        return _missing_q()
    try:
        distance = int(request.args.get("d", "1"))
    except ValueError:
        return jsonify({"error": "Parameter 'd' must be an integer"}), 400
    if distance < 0:
        return jsonify({"error": "Parameter 'd' must be non-negative"}), 400
    limit = _limit()
    with lock.read_lock():
        matches = _collect(tree.iter_neighbor(q, distance), limit)
    return jsonify({"key": q, "distance": distance, "count": len(matches), "matches": matches})


@app.route("/crossword")
def crossword():
    """Return keys matching a pattern where the joker matches any character."""
    q = _query()
    if not q:
        return _missing_q()
    joker = request.args.get("joker", "?")
    if len(joker) != 1:
        return jsonify({"error": "Parameter 'joker' must be a single character"}), 400
    limit = _limit()
    with lock.read_lock():
        matches = _collect(tree.iter_crossword(q, joker), limit)
    return jsonify({"pattern": q, "joker": joker, "count": len(matches), "matches": matches})


@app.route("/dot")
def dot():
    """Graphviz description of the current tree shape."""
    buf = io.BytesIO()
    with lock.read_lock():
        tree.pretty_print(buf)
    return Response(buf.getvalue(), mimetype="text/vnd.graphviz")


@app.route("/insert", methods=["POST"])
def insert():
    """Insert a key into the tree."""
    body = request.get_json(silent=True) or {}
    key = str(body.get("key", "")).strip().lower()
    value = body.get("value", key)

    if not key:
        return jsonify({"error": "Missing 'key' in request body"}), 400
    if len(key) > MAX_KEY_LENGTH:
        return jsonify({"error": f"Key too long (max {MAX_KEY_LENGTH} chars)"}), 400

    with lock.write_lock():
        previous = tree.insert(key, value)
        size = len(tree)
    logger.info("Inserted key=%s", key)
    return jsonify({"inserted": key, "value": value, "previous": previous, "tree_size": size}), 201


@app.route("/delete", methods=["DELETE"])
def delete():
    """Delete a key from the tree."""
    q = _query()
    if not q:
        return _missing_q()

    with lock.write_lock():
        deleted = tree.contains_key(q)
        if deleted:
            tree.remove(q)
        size = len(tree)
    if deleted:
        logger.info("Deleted key=%s", q)
    status = 200 if deleted else 404
    return jsonify({"key": q, "deleted": deleted, "tree_size": size}), status


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------

def main() -> None:
    port = int(os.environ.get("PORT", 8080))
    debug = os.environ.get("FLASK_DEBUG", "0") == "1"
    logger.info("Starting TST Lookup Service on port %d", port)
    app.run(host="0.0.0.0", port=port, debug=debug)


if __name__ == "__main__":
    main()
