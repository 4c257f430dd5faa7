from __future__ import annotations

import argparse
import sys
from typing import Hashable, List, Optional, Sequence

from .blocks import BlockSystem
from .cosets import BASE_POLICIES, InvariantViolation
from .group import PermutationGroup, generate_group
from .permutation import Permutation, parse_point
from .sylow import sylow


def _parse_domain(value: Optional[str]) -> List[Hashable]:
    if not value or not value.strip():
        return []
    points: List[Hashable] = []
    for raw_part in value.split(","):
        part = raw_part.strip()
        if not part:
            raise ValueError("Empty domain entry; expected comma-separated points.")
        points.append(parse_point(part))
    return points


def _build_group(args: argparse.Namespace) -> PermutationGroup:
    perms = [Permutation.parse(text) for text in args.generators]
    domain = _parse_domain(args.domain)
    for g in perms:
        for x in g.domain:
            if x not in domain:
                domain.append(x)
    return generate_group(domain, *perms, policy=args.policy)


def _cmd_order(args: argparse.Namespace) -> int:
    group = _build_group(args)
    print(f"order {group.size()}")
    print("base " + " ".join(str(b) for b in group.tables.base()))
    return 0


def _cmd_elements(args: argparse.Namespace) -> int:
    group = _build_group(args)
    for g in group:
        print(g)
    return 0


def _cmd_sylow(args: argparse.Namespace) -> int:
    group = _build_group(args)
    result = sylow(group, p=args.prime, verbose=args.verbose)
    print(f"p {result.p}")
    print(f"sylow_order {result.sylow_subgroup.size()}")
    print(f"sylow_generators {result.sylow_subgroup}")
    print(f"index {len(result.coset_representatives)}")
    for gamma in result.coset_representatives:
        print(f"  {gamma}")
    return 0


def _cmd_orbits(args: argparse.Namespace) -> int:
    group = _build_group(args)
    for block in BlockSystem.orbits(group, _parse_domain(args.domain)):
        print("{" + " ".join(str(x) for x in block) + "}")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="permgroups")
    sub = parser.add_subparsers(dest="command", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "generators",
        nargs="+",
        help="Generators in cycle notation, e.g. '(1 2 3)(4 5)'.",
    )
    common.add_argument(
        "--domain",
        type=str,
        default=None,
        help="Comma-separated domain points (defaults to the points named by the generators).",
    )
    common.add_argument(
        "--policy",
        choices=BASE_POLICIES,
        default=None,
        help="Base point policy (defaults to $PERMGROUPS_BASE_POLICY, then 'first').",
    )
    common.add_argument("--verbose", action="store_true", help="Print progress lines.")

    sub.add_parser("order", parents=[common], help="Print the group order and base.")
    sub.add_parser("elements", parents=[common], help="List every group element.")
    syl = sub.add_parser("sylow", parents=[common], help="Sylow subgroup and coset representatives.")
    syl.add_argument(
        "--prime",
        type=int,
        default=None,
        help="Prime p (defaults to the prime with the largest power dividing the order).",
    )
    sub.add_parser("orbits", parents=[common], help="Print the orbits on the domain.")

    args = parser.parse_args(argv)
    try:
        if args.command == "order":
            return _cmd_order(args)
        if args.command == "elements":
            return _cmd_elements(args)
        if args.command == "sylow":
            return _cmd_sylow(args)
        if args.command == "orbits":
            return _cmd_orbits(args)
    except ValueError as exc:
        print(f"[cli] error: {exc}", file=sys.stderr)
        return 2
    except InvariantViolation as exc:
        print(f"[cli] internal error: {exc}", file=sys.stderr)
        return 3

    parser.print_help()
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
