import math, time
from flask import Blueprint, request, jsonify
from redis import Redis
from rq import Queue
from rq.job import Job
from rq.exceptions import NoSuchJobError

from primegen.config import Settings

search_bp = Blueprint("search_bp", __name__)

# Redis / RQ
settings = Settings.from_env()
redis_conn = Redis.from_url(settings.redis_url)
search_q = Queue("primes", connection=redis_conn, default_timeout=60*60*12)  # 12h

MAX_QUEUED_BITS = 4096

# ------------------ helpers ------------------
def _job_dict(job: Job) -> dict:
    d = {"job_id": job.id, "status": job.get_status(), "meta": job.meta or {}}
    if job.is_finished:
        d["result"] = job.return_value()
    if job.is_failed:
        d["exc_info"] = (job.exc_info or "")[-1024:]
    return d

def _client_ip() -> str:
    xff = request.headers.get("X-Forwarded-For", "")
    return xff.split(",")[0].strip() if xff else request.remote_addr

def ip_can_start(ip: str) -> bool:
    """Allow only one active (queued or started) search per IP."""
    ids = list(search_q.started_job_registry.get_job_ids()) + list(search_q.get_job_ids())
    for jid in ids:
        try:
            j = Job.fetch(jid, connection=redis_conn)
        except NoSuchJobError:
            continue
        if (j.meta or {}).get("ip") == ip:
            return False
    return True

# ------------------ API ------------------
@search_bp.post("/api/search/submit")
def search_submit():
    data = request.get_json(silent=True) or {}
    try:
        bits = int(data.get("bits", settings.bits))
        rounds = int(data.get("rounds", settings.rounds))
        seed = int(data["seed"]) if data.get("seed") not in (None, "") else None
        max_seconds = float(data["max_seconds"]) if data.get("max_seconds") not in (None, "") else None
        limb_bits = int(data.get("limb_bits", settings.limb_bits))
    except (TypeError, ValueError):
        return jsonify({"error": "bad params"}), 400
    if bits < 2 or bits > MAX_QUEUED_BITS:
        return jsonify({"error": f"bits must be between 2 and {MAX_QUEUED_BITS}"}), 400
    if rounds < 1 or rounds > 64:
        return jsonify({"error": "rounds must be between 1 and 64"}), 400
    if limb_bits not in (8, 16, 32, 64):
        return jsonify({"error": "limb_bits must be 8, 16, 32 or 64"}), 400
    if max_seconds is not None and (not math.isfinite(max_seconds) or max_seconds <= 0):
        return jsonify({"error": "max_seconds must be a positive number"}), 400

    ip = _client_ip()
    if not ip_can_start(ip):
        return jsonify({"error": "One active search per IP. Wait or abort the running job."}), 429

    job = search_q.enqueue("search_worker.prime_search_job", bits, rounds, seed, max_seconds, limb_bits,
                           meta={"bits": bits, "rounds": rounds, "ip": ip, "submitted": time.time()})
    ids = search_q.get_job_ids()
    pos = ids.index(job.id) + 1 if job.id in ids else 1
    note = "Warning: wide searches run on pure-Python limbs and can take a long time." if bits > 256 else ""
    return jsonify({"job_id": job.id, "status": job.get_status(), "bits": bits, "queue_position": pos, "note": note})

@search_bp.get("/api/search/<job_id>")
def search_status(job_id):
    try:
        job = Job.fetch(job_id, connection=redis_conn)
    except NoSuchJobError:
        return jsonify({"error": "unknown job"}), 404
    return jsonify(_job_dict(job))

@search_bp.post("/api/search/<job_id>/abort")
def search_abort(job_id):
    try:
        job = Job.fetch(job_id, connection=redis_conn)
    except NoSuchJobError:
        return jsonify({"error": "unknown job"}), 404
    if job.get_status() == "started":
        from rq.command import send_stop_job_command
        send_stop_job_command(redis_conn, job_id)
    job.cancel()
    return jsonify({"ok": True, "job_id": job_id, "status": job.get_status()})

@search_bp.get("/api/queue")
def queue_info():
    ids = search_q.get_job_ids()
    return jsonify({"queue": search_q.name, "size": len(ids), "head": ids[:10]})
