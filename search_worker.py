import logging
from rq import get_current_job

from primegen.biguint import Width
from primegen.search import SearchPolicy, search_prime

logger = logging.getLogger(__name__)


def _progress_to_meta(job):
    def report(attempts, elapsed):
        job.meta["attempts"] = attempts
        job.meta["elapsed_s"] = round(elapsed, 1)
        job.save_meta()
    return report


def prime_search_job(bits, rounds=10, seed=None, max_seconds=None, limb_bits=32):
    """
    Queued prime search for widths too slow to run inside a request.
      - multi-limb width (limb_bits) above 64 bits, native word below
      - hard stop after max_seconds when given
      - progress lands in job.meta (attempts, elapsed_s)
    Returns: dict with status, prime (hex), attempts, elapsed_ms
    """
    bits = int(bits)
    width = Width.native() if bits <= 64 else Width.for_bits(bits, int(limb_bits))
    policy = SearchPolicy(max_duration=max_seconds,
                          on_budget="fail" if max_seconds else "continue")
    job = get_current_job()
    on_progress = _progress_to_meta(job) if job is not None else None
    res = search_prime(bits, rounds=int(rounds), seed=seed, policy=policy,
                       width=width, on_progress=on_progress)
    logger.info("search job done: %s", res.as_dict()["status"])
    return res.as_dict()
