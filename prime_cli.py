#!/usr/bin/env python3
# Generate a random probable prime or test a hex number.
#   python3 prime_cli.py generate --bits 30 --out prime.txt
#   python3 prime_cli.py generate --bits 1024 --limb-bits 32 --max-seconds 120
#   python3 prime_cli.py check 0x7fffffff --rounds 10

import sys, argparse, logging
import sympy as sp

from primegen import BigUint, PrimegenError, check_candidate, search_prime
from primegen.biguint import Width, canonical_hex
from primegen.candidates import make_rng
from primegen.config import Settings
from primegen.persist import write_prime_file
from primegen.search import SearchPolicy


def _policy(args, settings: Settings) -> SearchPolicy:
    max_seconds = args.max_seconds if args.max_seconds is not None else settings.max_seconds
    max_attempts = args.max_attempts if args.max_attempts is not None else settings.max_attempts
    hard = args.hard_limit or settings.hard_limit
    return SearchPolicy(max_attempts=max_attempts, max_duration=max_seconds,
                        on_budget="fail" if hard else "continue")


def cmd_generate(args, settings: Settings) -> int:
    width = Width.for_bits(args.bits, args.limb_bits) if args.limb_bits else settings.width_for(args.bits)
    res = search_prime(args.bits, rounds=args.rounds, seed=args.seed,
                       policy=_policy(args, settings), width=width)
    if not res.found:
        print(f"No prime found: gave up after {res.attempts} attempts in {res.elapsed:.1f} seconds")
        return 1

    print(f"\nFound probable {args.bits}-bit prime after {res.attempts} attempts in {res.elapsed:.1f} seconds:")
    print(f"  p = {res.hex}")
    print(f"  bit length: {res.prime.bit_length()} bits")
    if args.verify:
        ok = sp.isprime(int(res.prime))
        print(f"  sympy.isprime: {ok}")
        if not ok:
            return 1
    if args.out:
        try:
            path = write_prime_file(args.out, res.prime)
        except OSError as e:
            print(f"Failed to write {args.out}: {e}", file=sys.stderr)
            return 1
        print(f"Saved prime in hex to {path}")
    return 0


def cmd_check(args, settings: Settings) -> int:
    digits = canonical_hex(args.n)
    bits = args.bits or max(1, len(digits) * 4)
    limb_bits = args.limb_bits or settings.limb_bits
    if args.bits or args.limb_bits:
        width = Width.for_bits(bits, limb_bits)
    else:
        width = settings.width_for(bits)
    n = BigUint.from_hex(digits, width)
    print(f"Testing input n = {n.hex()}")

    report = check_candidate(n, rounds=args.rounds, rng=make_rng(args.seed))
    if report.verdict == "small-prime":
        print(f"Number equals small prime {report.small_prime} -> prime")
        return 0
    if report.verdict == "divisible":
        print(f"Divisible by small prime {report.small_prime} -> composite")
        return 1
    if report.verdict == "not-prime":
        print("Overall result: not prime")
        return 1
    if report.verdict == "prime":
        print("No small prime factor below the trial-division bound -> prime")
        return 0
    for r in report.rounds:
        print(f"  base {r.index:2d}: {r.base.hex()} -> {'probably prime' if r.passed else 'composite'}")
    print(f"Overall result: {'probably prime' if report.is_prime else 'composite'}")
    return 0 if report.is_prime else 1


def main(argv=None):
    settings = Settings.from_env()
    ap = argparse.ArgumentParser(description="Random prime generation and Miller-Rabin testing.")
    sub = ap.add_subparsers(dest="cmd", required=True)

    g = sub.add_parser("generate", help="search for a random probable prime")
    g.add_argument("--bits", type=int, default=settings.bits, help="bit length of the prime")
    g.add_argument("--rounds", type=int, default=settings.rounds, help="Miller-Rabin rounds")
    g.add_argument("--seed", type=int, default=None, help="rng seed for reproducibility")
    g.add_argument("--limb-bits", type=int, choices=(8, 16, 32, 64), default=None,
                   help="force a multi-limb width (default: native word up to 64 bits)")
    g.add_argument("--max-attempts", type=int, default=None, help="attempt budget")
    g.add_argument("--max-seconds", type=float, default=None, help="time budget in seconds")
    g.add_argument("--hard-limit", action="store_true", help="fail when the budget runs out instead of continuing")
    g.add_argument("--out", default=settings.out, help="file to save the prime to ('' to skip)")
    g.add_argument("--verify", action="store_true", help="cross-check the result with sympy.isprime")

    c = sub.add_parser("check", help="test a hex number for primality")
    c.add_argument("n", help="number in hex, e.g. 0x3b0c1abd")
    c.add_argument("--rounds", type=int, default=settings.rounds, help="Miller-Rabin rounds")
    c.add_argument("--seed", type=int, default=None, help="rng seed for reproducibility")
    c.add_argument("--bits", type=int, default=None, help="integer width in bits (default: fit the input)")
    c.add_argument("--limb-bits", type=int, choices=(8, 16, 32, 64), default=None, help="limb size")

    args = ap.parse_args(argv)
    logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        if args.cmd == "generate":
            rc = cmd_generate(args, settings)
        else:
            rc = cmd_check(args, settings)
    except PrimegenError as e:
        print(f"error: {e}", file=sys.stderr)
        rc = 2
    raise SystemExit(rc)


if __name__ == "__main__":
    main()
