import logging, math, time
from flask import Flask, request, jsonify

from primegen import BigUint, PrimegenError, check_candidate, search_prime
from primegen.biguint import Width, canonical_hex
from primegen.candidates import make_rng
from primegen.config import Settings
from primegen.search import SearchPolicy
from search_api import search_bp

settings = Settings.from_env()
logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

app = Flask(__name__)
app.register_blueprint(search_bp)


def _opt_int(data, key):
    v = data.get(key)
    return int(v) if v not in (None, "") else None


@app.errorhandler(PrimegenError)
def _primegen_error(e):
    return jsonify(error=str(e)), 400


@app.post("/api/generate")
def api_generate():
    t0 = time.time()
    data = request.get_json(force=True, silent=True) or {}
    try:
        bits = int(data.get("bits", settings.bits))
        rounds = int(data.get("rounds", settings.rounds))
        seed = _opt_int(data, "seed")
        max_attempts = _opt_int(data, "max_attempts")
        max_seconds = float(data.get("max_seconds", settings.sync_max_seconds))
    except (TypeError, ValueError):
        return jsonify(error="bad params"), 400
    if not math.isfinite(max_seconds) or max_seconds <= 0:
        return jsonify(error="max_seconds must be a positive number"), 400
    if bits > settings.max_sync_bits:
        return jsonify(error=f"bits > {settings.max_sync_bits}: use /api/search/submit"), 400
    if rounds < 1 or rounds > 64:
        return jsonify(error="rounds must be between 1 and 64"), 400
    max_seconds = min(max_seconds, settings.sync_max_seconds)

    policy = SearchPolicy(max_attempts=max_attempts, max_duration=max_seconds, on_budget="fail")
    res = search_prime(bits, rounds=rounds, seed=seed, policy=policy, width=settings.width_for(bits))
    d = jsonify(res.as_dict())
    d.headers["X-Compute-ms"] = str(int((time.time()-t0)*1000))
    return d


@app.post("/api/check")
def api_check():
    data = request.get_json(force=True, silent=True) or {}
    try:
        digits = canonical_hex(str(data.get("n", "")))
        rounds = int(data.get("rounds", settings.rounds))
        seed = _opt_int(data, "seed")
    except (TypeError, ValueError):
        return jsonify(error="n must be a hex string"), 400
    if rounds < 1 or rounds > 64:
        return jsonify(error="rounds must be between 1 and 64"), 400
    bits = len(digits) * 4
    if bits > settings.max_sync_bits:
        return jsonify(error=f"n wider than {settings.max_sync_bits} bits"), 400
    n = BigUint.from_hex(digits, settings.width_for(bits))
    report = check_candidate(n, rounds=rounds, rng=make_rng(seed))
    return jsonify(report.as_dict())


@app.get("/api/health")
def api_health():
    return jsonify(ok=True, max_sync_bits=settings.max_sync_bits)


if __name__ == "__main__":
    app.run("127.0.0.1", 8082, debug=True)
